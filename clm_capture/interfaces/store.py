"""Capture store protocol: persistence of captures across invocations."""
from typing import Protocol

from ..models import Capture


class CaptureStore(Protocol):
    """Abstract interface for reading and writing captures."""

    async def write(self, capture: Capture) -> None: ...

    async def query(
        self,
        protocol: str | None = None,
        pair: str | None = None,
        limit: int | None = None,
    ) -> list[Capture]: ...

    async def delete_older_than(self, days: int) -> int: ...
