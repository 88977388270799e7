"""Supabase (PostgREST) capture store over aiohttp."""
from __future__ import annotations

import asyncio
import logging
import ssl
from datetime import datetime, timedelta, timezone
from typing import Any

import aiohttp
import certifi

from ..config import SupabaseConfig
from ..models import Capture, Position

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """The hosted store rejected a capture write."""


def position_row(capture: Capture, position: Position) -> dict[str, Any]:
    """Row for the ``positions`` table."""
    captured_at = position.captured_at or capture.timestamp
    return {
        "capture_id": capture.id,
        "protocol": capture.protocol,
        "pair": position.pair,
        "token0": position.token0,
        "token1": position.token1,
        "fee_tier": position.fee_tier,
        "balance": position.balance,
        "pending_yield": position.pending_yield,
        "apy": position.apy,
        "range_min": position.range_min,
        "range_max": position.range_max,
        "current_price": position.current_price,
        "in_range": position.in_range,
        "range_status": position.range_status,
        "distance_from_range": position.distance_from_range,
        "network": position.network,
        "captured_at": captured_at.isoformat(),
    }


class SupabaseCaptureStore:
    """Captures in the ``captures`` table, positions mirrored to ``positions``."""

    def __init__(self, config: SupabaseConfig) -> None:
        self.base_url = f"{config.url.rstrip('/')}/rest/v1"
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)
        self._headers = {
            "apikey": config.anon_key,
            "Authorization": f"Bearer {config.anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _session(self) -> aiohttp.ClientSession:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        return aiohttp.ClientSession(
            connector=connector, headers=self._headers, timeout=self.timeout
        )

    async def write(self, capture: Capture) -> None:
        record = capture.to_dict()

        async with self._session() as session:
            async with session.post(f"{self.base_url}/captures", json=[record]) as response:
                if response.status not in (200, 201):
                    body = await response.text()
                    raise StoreError(
                        f"Capture {capture.id} rejected: HTTP {response.status} {body}"
                    )

            rows = [position_row(capture, p) for p in capture.snapshot.positions]
            if not rows:
                logger.info("Capture %s saved to Supabase", capture.id)
                return

            # The capture record is the unit of success; position rows are a mirror.
            try:
                async with session.post(f"{self.base_url}/positions", json=rows) as response:
                    if response.status not in (200, 201):
                        logger.error(
                            "Failed to save positions for %s: HTTP %s",
                            capture.id,
                            response.status,
                        )
            except aiohttp.ClientError as e:
                logger.error("Failed to save positions for %s: %s", capture.id, e)

        logger.info("Capture %s saved to Supabase", capture.id)

    async def query(
        self,
        protocol: str | None = None,
        pair: str | None = None,
        limit: int | None = None,
    ) -> list[Capture]:
        params = {"select": "*", "order": "timestamp.desc"}
        if protocol:
            params["protocol"] = f"eq.{protocol}"
        # Pair lives inside the capture payload, so it is filtered here.
        if limit and not pair:
            params["limit"] = str(limit)

        try:
            async with self._session() as session:
                async with session.get(f"{self.base_url}/captures", params=params) as response:
                    if response.status != 200:
                        logger.error("Error fetching captures: HTTP %s", response.status)
                        return []
                    rows = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Error fetching captures: %s", e)
            return []

        captures = [Capture.from_dict(r) for r in rows or []]
        if pair:
            captures = [
                c for c in captures if any(p.pair == pair for p in c.snapshot.positions)
            ]
        return captures[:limit] if limit else captures

    async def delete_older_than(self, days: int) -> int:
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        params = {"timestamp": f"lt.{cutoff.isoformat()}"}

        async with self._session() as session:
            async with session.delete(f"{self.base_url}/captures", params=params) as response:
                if response.status not in (200, 204):
                    body = await response.text()
                    raise StoreError(f"Delete rejected: HTTP {response.status} {body}")
                deleted = await response.json() if response.status == 200 else []

        logger.info("Deleted %d captures older than %d days", len(deleted), days)
        return len(deleted)
