"""Read side over stored captures: latest positions, stats, pruning."""
from __future__ import annotations

import logging

from ..cache import PositionCache
from ..interfaces.store import CaptureStore
from ..models import Capture, PositionStats, TrackedPosition

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(
        self, store: CaptureStore, cache: PositionCache, retention_days: int = 30
    ) -> None:
        self._store = store
        self._cache = cache
        self._retention_days = retention_days

    async def captures(
        self,
        protocol: str | None = None,
        pair: str | None = None,
        limit: int | None = None,
    ) -> list[Capture]:
        return await self._store.query(protocol=protocol, pair=pair, limit=limit)

    async def latest_positions(self, protocol: str | None = None) -> list[TrackedPosition]:
        """Newest position per (protocol, pair) across stored captures.

        The unfiltered result is cached until the TTL lapses or a write
        invalidates it.
        """
        if protocol is None:
            cached = self._cache.get()
            if cached is not None:
                logger.debug("Using cached latest positions (%d)", len(cached))
                return list(cached)

        latest: dict[tuple[str, str], TrackedPosition] = {}
        for capture in await self._store.query(protocol=protocol):
            if capture.failure is not None:
                continue
            for position in capture.snapshot.positions:
                if not position.pair:
                    continue
                at = position.captured_at or capture.timestamp
                key = (capture.protocol, position.pair)
                existing = latest.get(key)
                if existing is None or at > existing.captured_at:
                    latest[key] = TrackedPosition(
                        protocol=capture.protocol,
                        capture_id=capture.id,
                        captured_at=at,
                        position=position,
                    )

        result = tuple(latest.values())
        if protocol is None:
            self._cache.put(result)
        return list(result)

    async def position_stats(self) -> PositionStats:
        tracked = await self.latest_positions()
        positions = [t.position for t in tracked]
        if not positions:
            return PositionStats()

        return PositionStats(
            total_positions=len(positions),
            in_range_count=sum(1 for p in positions if p.in_range is True),
            out_of_range_count=sum(1 for p in positions if p.in_range is False),
            total_value=sum(p.balance or 0.0 for p in positions),
            total_pending_yield=sum(p.pending_yield or 0.0 for p in positions),
            # Missing APY counts as zero.
            avg_apy=sum(p.apy or 0.0 for p in positions) / len(positions),
            protocols=tuple(dict.fromkeys(t.protocol for t in tracked)),
            pairs=tuple(dict.fromkeys(p.pair for p in positions if p.pair)),
        )

    async def prune(self, days: int | None = None) -> int:
        """Delete captures older than ``days`` (default: configured retention)."""
        days = self._retention_days if days is None else days
        deleted = await self._store.delete_older_than(days)
        self._cache.invalidate()
        return deleted
