"""Hyperion extractor: positions list rows, or a single position detail page."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ...interfaces.page_source import PageSource
from ...models import Position, Snapshot
from ...normalize import (
    active_flag_fields,
    canonical_pair,
    dedupe_by_pair,
    ordered_range,
    parse_currency,
    parse_number,
    parse_percent,
    range_fields,
)
from ...page import BLOCK, ROW
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


class HyperionExtractor(BaseExtractor):
    """Parse Hyperion CLMM positions on Aptos."""

    protocol_name = "Hyperion"
    hosts = ("hyperion",)
    detail_path = "/position/"

    def __init__(self, token_map: dict[str, str] | None = None) -> None:
        self._token_map = {**parser.DEFAULT_TOKEN_MAP, **(token_map or {})}

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        candidates = page.regions(ROW) + page.regions(BLOCK)
        rows = [r for r in candidates if parser.is_position_row(r.text)]
        logger.debug("Hyperion: found %d candidate rows", len(rows))
        if not rows:
            raise AnchorNotFoundError("position rows", make_snapshot((), captured_at))

        parsed: list[Position] = []
        for row in rows:
            values = parser.parse_row(row.text)
            position = build_position(
                values, active_flag_fields(parser.is_active(row.text)), captured_at
            )
            if position:
                parsed.append(position)
        return make_snapshot(dedupe_by_pair(parsed), captured_at)

    def _extract_detail(self, page: PageSource, captured_at: datetime) -> Snapshot:
        texts = detail_texts(page)
        values = self._detail_values(page, texts)

        ranges = range_fields(
            values.get("range_min"), values.get("range_max"), values.get("current_price")
        )
        position = build_position(values, ranges, captured_at)
        if position is None:
            logger.warning(
                "Hyperion: detail page %s lacks pair or balance", page.address.path
            )
        return make_snapshot([position] if position else [], captured_at)

    def _detail_values(self, page: PageSource, texts: list[str]) -> dict[str, Any]:
        values: dict[str, Any] = {}

        tokens = parser.pair_from_query(page.address.query, self._token_map)
        if tokens is None:
            tokens = parser.pair_from_text(page.text())
        if tokens:
            values["token0"], values["token1"] = tokens
            values["pair"] = canonical_pair(*tokens)

        bounds = scan_texts(texts, parser.PRICE_RANGE_RE)
        if bounds:
            range_min = parse_number(bounds.group(1))
            range_max = parse_number(bounds.group(2))
        else:
            low = scan_texts(texts, parser.MIN_PRICE_RE)
            high = scan_texts(texts, parser.MAX_PRICE_RE)
            range_min = parse_number(low.group(1)) if low else None
            range_max = parse_number(high.group(1)) if high else None
        values["range_min"], values["range_max"] = ordered_range(range_min, range_max)

        current = scan_texts(texts, parser.CURRENT_PRICE_RE)
        values["current_price"] = parse_number(current.group(1)) if current else None

        balance = scan_texts(texts, parser.VALUE_K_LABEL_RE, parser.BALANCE_LABEL_RE)
        values["balance"] = parse_currency(balance.group(1)) if balance else None

        apr = scan_texts(texts, parser.POSITION_APR_RE, parser.APR_LABEL_RE)
        values["apy"] = parse_percent(apr.group(1)) if apr else None

        rewards = scan_texts(texts, parser.CLAIMABLE_RE, parser.REWARD_LABEL_RE)
        values["pending_yield"] = parse_currency(rewards.group(1)) if rewards else None
        return values
