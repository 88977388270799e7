"""PancakeSwap extractor — positions table, or a single liquidity detail page."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ...interfaces.page_source import PageSource
from ...models import Position, Snapshot
from ...normalize import (
    canonical_pair,
    dedupe_by_pair,
    ordered_range,
    parse_currency,
    parse_number,
    parse_percent,
    range_fields,
)
from ...page import BLOCK, ROW, Region
from ..base import (
    AnchorNotFoundError,
    BaseExtractor,
    build_position,
    detail_texts,
    make_snapshot,
    scan_texts,
)
from . import parser

logger = logging.getLogger(__name__)


class PancakeSwapExtractor(BaseExtractor):
    """Parse PancakeSwap v3 positions."""

    protocol_name = "PancakeSwap"
    hosts = ("pancakeswap.finance",)
    detail_path = "/liquidity/"

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        rows = [r for r in page.regions(ROW) if len(r.cells) >= parser.MIN_ROW_CELLS]
        if not rows:
            raise AnchorNotFoundError("position rows", make_snapshot((), captured_at))

        parsed: list[Position] = []
        for row in rows:
            position = self._parse_row(row, captured_at)
            if position:
                parsed.append(position)
        return make_snapshot(dedupe_by_pair(parsed), captured_at)

    def _parse_row(self, row: Region, captured_at: datetime) -> Position | None:
        if len(row.cells) < parser.MIN_ROW_CELLS:
            return None
        text = row.text or " ".join(row.cells)

        tokens = parser.parse_pair(row.cells[0], text)
        if tokens is None:
            return None

        values = {
            "pair": canonical_pair(*tokens),
            "token0": tokens[0],
            "token1": tokens[1],
            "balance": parser.first_dollar_amount(text),
            "apy": parser.first_percentage(text),
            "pending_yield": parser.pending_amount(text),
        }
        triplet = parser.range_triplet(text)
        if triplet:
            values["range_min"], values["range_max"], values["current_price"] = triplet
            ranges = range_fields(*triplet)
        else:
            ranges = range_fields(None, None, None)
        return build_position(values, ranges, captured_at)

    def _extract_detail(self, page: PageSource, captured_at: datetime) -> Snapshot:
        texts = detail_texts(page)
        tokens = None
        for block in page.regions(BLOCK):
            tokens = parser.heading_pair(block.text)
            if tokens:
                break

        values: dict[str, Any] = {}
        if tokens:
            values.update(pair=canonical_pair(*tokens), token0=tokens[0], token1=tokens[1])

        balance = scan_texts(texts, parser.BALANCE_LABEL_RE)
        apr = scan_texts(texts, parser.APR_LABEL_RE)
        unclaimed = scan_texts(texts, parser.UNCLAIMED_RE)
        low = scan_texts(texts, parser.MIN_PRICE_RE)
        high = scan_texts(texts, parser.MAX_PRICE_RE)
        current = scan_texts(texts, parser.CURRENT_PRICE_RE)

        range_min, range_max = ordered_range(
            parse_number(low.group(1)) if low else None,
            parse_number(high.group(1)) if high else None,
        )
        values.update(
            balance=parse_currency(balance.group(1)) if balance else None,
            apy=parse_percent(apr.group(1)) if apr else None,
            pending_yield=parse_currency(unclaimed.group(1)) if unclaimed else None,
            range_min=range_min,
            range_max=range_max,
            current_price=parse_number(current.group(1)) if current else None,
        )

        position = build_position(
            values, range_fields(range_min, range_max, values["current_price"]), captured_at
        )
        if position is None:
            logger.warning(
                "PancakeSwap: detail page %s lacks pair or balance", page.address.path
            )
        return make_snapshot([position] if position else [], captured_at)
