"""Page source protocol — rendered page text, regions and address."""
from typing import Protocol

from ..page import PageAddress, Region


class PageSource(Protocol):
    """Read-only view over a rendered page."""

    @property
    def address(self) -> PageAddress: ...

    def text(self) -> str: ...

    def regions(self, kind: str) -> list[Region]: ...
