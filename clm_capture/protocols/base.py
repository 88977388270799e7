"""Shared extractor plumbing: host detection, listing/detail routing, anchor
discovery and layered pattern scanning."""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

from ..interfaces.page_source import PageSource
from ..models import Position, Snapshot, Summary
from ..normalize import RangeFields
from ..page import BLOCK, REGION_KINDS, PageAddress, Region

logger = logging.getLogger(__name__)

# How far up the region tree a container search may walk.
MAX_PARENT_DEPTH = 10


class PageContentError(ValueError):
    """The page carries no text and no structural regions at all."""


class AnchorNotFoundError(PageContentError):
    """No region on the page matched the layout's anchor markers.

    ``snapshot`` holds what was read before giving up: no positions, and the
    page-level summary where the layout has one.
    """

    def __init__(self, anchor: str, snapshot: Snapshot) -> None:
        super().__init__(f"no {anchor} found")
        self.anchor = anchor
        self.snapshot = snapshot


def require_content(page: PageSource) -> None:
    if page.text().strip():
        return
    if any(page.regions(kind) for kind in REGION_KINDS):
        return
    raise PageContentError(f"No page content for {page.address.url}")


def contains_all(text: str, markers: Iterable[str]) -> bool:
    return all(marker in text for marker in markers)


def smallest_region(
    regions: Sequence[Region],
    markers: Iterable[str],
    predicate: Callable[[str], bool] | None = None,
) -> Region | None:
    """Smallest region whose text holds every marker (and passes ``predicate``)."""
    markers = tuple(markers)
    candidates = [
        r
        for r in regions
        if contains_all(r.text, markers) and (predicate is None or predicate(r.text))
    ]
    return min(candidates, key=lambda r: len(r.text), default=None)


def enclosing_region(
    region: Region, markers: Iterable[str], max_depth: int = MAX_PARENT_DEPTH
) -> Region | None:
    """Nearest enclosing region (at most ``max_depth`` levels up) holding every marker."""
    markers = tuple(markers)
    for parent in region.parents[:max_depth]:
        if contains_all(parent.text, markers):
            return parent
    return None


def first_group(text: str, *patterns: re.Pattern[str]) -> str | None:
    """Group 1 of the first pattern that matches ``text``."""
    match = first_match(text, *patterns)
    return match.group(1) if match else None


def first_match(text: str, *patterns: re.Pattern[str]) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def scan_texts(
    texts: Sequence[str], *patterns: re.Pattern[str]
) -> re.Match[str] | None:
    """Layered scan over many texts.

    Each pattern is tried against every text before the next, looser pattern
    is considered; the first match found wins.
    """
    for pattern in patterns:
        for text in texts:
            match = pattern.search(text)
            if match:
                return match
    return None


def detail_texts(page: PageSource) -> list[str]:
    """Block texts in document order, then the whole page text."""
    texts = [r.text for r in page.regions(BLOCK) if r.text]
    texts.append(page.text())
    return texts


def build_position(
    values: dict[str, Any], ranges: RangeFields, captured_at: datetime
) -> Position | None:
    """Position from extracted values, or None without both pair and balance."""
    if values.get("pair") is None or values.get("balance") is None:
        return None
    return Position(
        **values,
        in_range=ranges.in_range,
        range_status=ranges.range_status,
        distance_from_range=ranges.distance_from_range,
        captured_at=captured_at,
    )


class BaseExtractor(ABC):
    """Host-matched extractor with listing/detail routing."""

    protocol_name: str = ""
    hosts: tuple[str, ...] = ()
    # Path fragment that marks the single-position detail view, if any.
    detail_path: str | None = None

    def detect(self, address: PageAddress) -> bool:
        return any(host in address.host for host in self.hosts)

    def is_detail(self, address: PageAddress) -> bool:
        return self.detail_path is not None and self.detail_path in address.path

    def extract(
        self, page: PageSource, captured_at: datetime | None = None
    ) -> Snapshot:
        require_content(page)
        captured_at = captured_at or datetime.now(timezone.utc)

        if self.is_detail(page.address):
            logger.debug("%s: parsing detail page %s", self.protocol_name, page.address.path)
            snapshot = self._extract_detail(page, captured_at)
        else:
            snapshot = self._extract_listing(page, captured_at)

        logger.info(
            "%s: parsed %d positions (%d in range)",
            self.protocol_name,
            snapshot.position_count,
            snapshot.in_range_count,
        )
        return snapshot

    @abstractmethod
    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        ...

    def _extract_detail(self, page: PageSource, captured_at: datetime) -> Snapshot:
        return self._extract_listing(page, captured_at)


def make_snapshot(
    positions: Iterable[Position],
    captured_at: datetime,
    summary: Summary | None = None,
) -> Snapshot:
    return Snapshot(
        summary=summary or Summary(),
        positions=tuple(positions),
        captured_at=captured_at,
    )
