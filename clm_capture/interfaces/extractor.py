"""Extractor protocol — per-protocol page parsing."""
from datetime import datetime
from typing import Protocol

from ..models import Snapshot
from ..page import PageAddress
from .page_source import PageSource


class Extractor(Protocol):
    """Turns one protocol's rendered page into a Snapshot."""

    @property
    def protocol_name(self) -> str: ...

    def detect(self, address: PageAddress) -> bool: ...

    def extract(
        self, page: PageSource, captured_at: datetime | None = None
    ) -> Snapshot: ...
