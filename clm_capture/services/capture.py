"""Capture orchestration: detect, extract, validate, compare, store, notify."""
from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from ..cache import PositionCache
from ..diff import compare
from ..interfaces.notifier import Notifier
from ..interfaces.page_source import PageSource
from ..interfaces.store import CaptureStore
from ..models import (
    Capture,
    ComparisonReport,
    ExtractionFailure,
    Snapshot,
    ValidationReport,
)
from ..protocols.base import AnchorNotFoundError
from ..registry import ProtocolRegistry
from ..validator import validate

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_capture_id(at: datetime) -> str:
    """``capture_<epoch-ms>_<9 random chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"capture_{int(at.timestamp() * 1000)}_{suffix}"


@dataclass(frozen=True)
class CaptureResult:
    capture: Capture
    validation: ValidationReport
    comparison: ComparisonReport | None = None


class CaptureService:
    """Runs one capture per page and records the outcome."""

    def __init__(
        self,
        registry: ProtocolRegistry,
        store: CaptureStore,
        cache: PositionCache,
        notifiers: Sequence[Notifier] = (),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._registry = registry
        self._store = store
        self._cache = cache
        self._notifiers = list(notifiers)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Message formatting
    # ------------------------------------------------------------------

    @staticmethod
    def _build_log_message(result: CaptureResult) -> str:
        capture = result.capture
        snapshot = capture.snapshot
        lines = [
            f"📸 {capture.protocol} capture",
            f"Positions: {snapshot.position_count} "
            f"({snapshot.in_range_count} in range, {snapshot.out_of_range_count} out)",
        ]
        if snapshot.summary.total_value is not None:
            lines.append(f"Total value: ${snapshot.summary.total_value:,.2f}")
        if capture.failure:
            lines.append(f"Extraction failed: {capture.failure.error}")
        lines.append(
            f"Validation: {len(result.validation.issues)} issue(s), "
            f"{len(result.validation.warnings)} warning(s)"
        )
        if result.comparison:
            lines.append(
                f"Changes: {len(result.comparison.critical_changes)} critical, "
                f"{len(result.comparison.significant_changes)} significant"
            )
        lines.append(capture.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC"))
        return "\n".join(lines)

    @staticmethod
    def _build_alert(result: CaptureResult) -> str | None:
        critical = result.comparison.critical_changes if result.comparison else ()
        issues = result.validation.issues
        if not critical and not issues:
            return None

        lines = [f"🚨 {result.capture.protocol}: {result.capture.url}", ""]
        lines.extend(f"• {change}" for change in critical)
        lines.extend(f"• Validation: {issue}" for issue in issues)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _notify(self, result: CaptureResult) -> None:
        log_message = self._build_log_message(result)
        alert = self._build_alert(result)

        for notifier in self._notifiers:
            try:
                await notifier.send_log(log_message, silent=True)
                if alert:
                    await notifier.send_alert(
                        alert, subject=f"{result.capture.protocol} capture alert"
                    )
            except Exception as e:
                logger.error("Notifier failed for %s: %s", result.capture.id, e)

    # ------------------------------------------------------------------
    # Core workflow
    # ------------------------------------------------------------------

    async def _previous_capture(self, protocol: str, capture_id: str) -> Capture | None:
        """Most recent successful capture of ``protocol``, other than this one."""
        try:
            history = await self._store.query(protocol=protocol)
        except Exception as e:
            logger.warning("History unavailable for %s, skipping comparison: %s", protocol, e)
            return None

        for capture in history:
            if capture.id == capture_id or capture.failure is not None:
                continue
            return capture
        return None

    async def capture(self, page: PageSource) -> CaptureResult | None:
        """Capture one page. Returns None when no protocol matches the page."""
        address = page.address
        extractor = self._registry.detect(address)
        if extractor is None:
            logger.info("No supported protocol for %s", address.url)
            return None

        protocol = extractor.protocol_name
        captured_at = self._clock()
        capture_id = new_capture_id(captured_at)

        failure: ExtractionFailure | None = None
        try:
            snapshot = extractor.extract(page, captured_at=captured_at)
        except AnchorNotFoundError as e:
            logger.warning("%s: %s on %s", protocol, e, address.url)
            failure = ExtractionFailure(protocol=protocol, error=str(e))
            snapshot = e.snapshot
        except Exception as e:
            logger.error("%s extraction failed for %s: %s", protocol, address.url, e)
            failure = ExtractionFailure(protocol=protocol, error=str(e))
            snapshot = Snapshot(captured_at=captured_at)

        validation = validate(snapshot)

        comparison: ComparisonReport | None = None
        if failure is None:
            previous = await self._previous_capture(protocol, capture_id)
            if previous:
                comparison = compare(snapshot, previous.snapshot, previous.timestamp)

        capture = Capture(
            id=capture_id,
            url=address.url,
            title=getattr(page, "title", "") or "",
            protocol=protocol,
            timestamp=captured_at,
            snapshot=snapshot,
            failure=failure,
        )
        await self._store.write(capture)
        self._cache.invalidate()

        result = CaptureResult(capture=capture, validation=validation, comparison=comparison)
        logger.info(
            "Captured %s: %d positions, %d issue(s), %d warning(s)",
            protocol,
            snapshot.position_count,
            len(validation.issues),
            len(validation.warnings),
        )
        await self._notify(result)
        return result

    async def capture_many(
        self, pages: Iterable[PageSource]
    ) -> list[CaptureResult | None]:
        """Capture pages one at a time; a failing page yields None."""
        results: list[CaptureResult | None] = []
        for page in pages:
            try:
                results.append(await self.capture(page))
            except Exception as e:
                logger.error("Capture of %s failed: %s", page.address.url, e)
                results.append(None)
        return results
