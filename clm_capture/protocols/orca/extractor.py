"""Orca extractor — portfolio table rows plus the summary header."""
from __future__ import annotations

import logging
from datetime import datetime

from ...interfaces.page_source import PageSource
from ...models import Position, Snapshot, Summary
from ...normalize import canonical_pair, dedupe_by_pair, range_fields
from ...page import BLOCK, ROW, Region
from ..base import (
    AnchorNotFoundError,
    BaseExtractor,
    build_position,
    make_snapshot,
    smallest_region,
)
from . import parser

logger = logging.getLogger(__name__)


class OrcaExtractor(BaseExtractor):
    """Parse Orca Whirlpool positions from the portfolio table."""

    protocol_name = "Orca"
    hosts = ("orca.so",)

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        summary = self._parse_summary(page.regions(BLOCK))

        rows = [r for r in page.regions(ROW) if len(r.cells) >= parser.MIN_ROW_CELLS]
        if not rows:
            raise AnchorNotFoundError(
                "position table rows", make_snapshot((), captured_at, summary)
            )

        parsed: list[Position] = []
        for row in rows:
            position = self._parse_row(row, captured_at)
            if position:
                parsed.append(position)

        logger.debug("Orca: %d of %d table rows carried a position", len(parsed), len(rows))
        return make_snapshot(dedupe_by_pair(parsed), captured_at, summary)

    def _parse_summary(self, blocks: list[Region]) -> Summary:
        total = smallest_region(blocks, parser.TOTAL_VALUE_MARKERS)
        estimated = smallest_region(blocks, parser.ESTIMATED_YIELD_MARKERS)
        pending = smallest_region(blocks, parser.PENDING_YIELD_MARKERS)

        amount, percent = (
            parser.parse_estimated_yield(estimated.text) if estimated else (None, None)
        )
        return Summary(
            total_value=parser.parse_dollar(total.text) if total else None,
            estimated_yield_amount=amount,
            estimated_yield_percent=percent,
            pending_yield=parser.parse_dollar(pending.text) if pending else None,
        )

    def _parse_row(self, row: Region, captured_at: datetime) -> Position | None:
        cells = row.cells
        if len(cells) < parser.MIN_ROW_CELLS:
            return None

        token0, token1, fee_tier = parser.parse_pool(cells[0])
        if not token0 or not token1:
            return None

        range_cell = parser.parse_range_cell(cells[4])
        current_price = parser.parse_price(cells[5])

        values = {
            "pair": canonical_pair(token0, token1),
            "token0": token0,
            "token1": token1,
            "fee_tier": fee_tier,
            "balance": parser.parse_dollar(cells[1]),
            "pending_yield": parser.parse_dollar(cells[2]),
            "apy": parser.parse_apy(cells[3]),
            "range_min": range_cell.range_min,
            "range_max": range_cell.range_max,
            "range_min_percent": range_cell.min_percent,
            "range_max_percent": range_cell.max_percent,
            "current_price": current_price,
        }
        ranges = range_fields(range_cell.range_min, range_cell.range_max, current_price)
        return build_position(values, ranges, captured_at)
