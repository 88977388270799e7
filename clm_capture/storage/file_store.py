"""Local JSON file capture store."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from ..models import Capture

logger = logging.getLogger(__name__)


class FileCaptureStore:
    """Captures kept newest first in one JSON file, capped at ``max_captures``.

    File reads and writes block the event loop; meant for the one-shot CLI.
    """

    def __init__(self, path: str | Path, max_captures: int = 1000) -> None:
        self._path = Path(path)
        self._max_captures = max_captures

    def _load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        with open(self._path, encoding="utf-8") as f:
            return json.load(f)

    def _save(self, records: list[dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
        tmp.replace(self._path)

    async def write(self, capture: Capture) -> None:
        records = self._load()
        records.insert(0, capture.to_dict())
        if len(records) > self._max_captures:
            logger.debug("Dropping %d oldest captures", len(records) - self._max_captures)
            records = records[: self._max_captures]
        self._save(records)
        logger.info("Capture %s saved to %s", capture.id, self._path)

    async def query(
        self,
        protocol: str | None = None,
        pair: str | None = None,
        limit: int | None = None,
    ) -> list[Capture]:
        captures = [Capture.from_dict(r) for r in self._load()]
        if protocol:
            captures = [c for c in captures if c.protocol == protocol]
        if pair:
            captures = [
                c for c in captures if any(p.pair == pair for p in c.snapshot.positions)
            ]
        captures.sort(key=lambda c: c.timestamp, reverse=True)
        return captures[:limit] if limit else captures

    async def delete_older_than(self, days: int) -> int:
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        records = self._load()
        kept = [r for r in records if Capture.from_dict(r).timestamp >= cutoff]
        deleted = len(records) - len(kept)
        if deleted:
            self._save(kept)
        logger.info("Deleted %d captures older than %d days", deleted, days)
        return deleted
