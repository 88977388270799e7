"""Explicit TTL cache for the latest-positions read path."""
from __future__ import annotations

import logging
import time
from typing import Callable

from .models import TrackedPosition

logger = logging.getLogger(__name__)


class PositionCache:
    """Holds the most recent latest-positions result for ``ttl_seconds``.

    Writers call ``invalidate()`` after every successful capture write; nothing
    else clears it.
    """

    def __init__(
        self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._positions: tuple[TrackedPosition, ...] | None = None
        self._stored_at = 0.0

    def is_valid(self) -> bool:
        if self._positions is None:
            return False
        return self._clock() - self._stored_at < self._ttl

    def get(self) -> tuple[TrackedPosition, ...] | None:
        if not self.is_valid():
            return None
        return self._positions

    def put(self, positions: tuple[TrackedPosition, ...]) -> None:
        self._positions = tuple(positions)
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        if self._positions is not None:
            logger.debug("Position cache invalidated")
        self._positions = None
        self._stored_at = 0.0
