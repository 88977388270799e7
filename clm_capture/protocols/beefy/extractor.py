"""Beefy extractor: CLM dashboard cards, or a single vault detail page."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ...interfaces.page_source import PageSource
from ...models import IN_RANGE, OUT_OF_RANGE, Position, Snapshot, Summary
from ...normalize import (
    RangeFields,
    canonical_pair,
    dedupe_by_pair,
    ordered_range,
    parse_currency,
    parse_number,
    parse_percent,
    range_fields,
)
from ...page import BLOCK, LINK, Region
from ..base import (
    MAX_PARENT_DEPTH,
    AnchorNotFoundError,
    BaseExtractor,
    build_position,
    detail_texts,
    make_snapshot,
    scan_texts,
)
from . import parser

logger = logging.getLogger(__name__)


class BeefyExtractor(BaseExtractor):
    """Parse Beefy CLM vault positions across chains."""

    protocol_name = "Beefy"
    hosts = ("beefy",)
    detail_path = "/vault/"

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        texts = detail_texts(page)
        deposited = scan_texts(texts, parser.DEPOSITED_RE)
        avg_apy = scan_texts(texts, parser.AVG_APY_RE)
        daily = scan_texts(texts, parser.DAILY_YIELD_RE)
        summary = Summary(
            total_value=parse_currency(deposited.group(1)) if deposited else None,
            average_apy=parse_percent(avg_apy.group(1)) if avg_apy else None,
            daily_yield=parse_currency(daily.group(1)) if daily else None,
        )

        cards = [
            r for r in page.regions(LINK) if parser.is_position_card(r.text, r.href)
        ]
        logger.debug("Beefy: found %d CLM position links", len(cards))
        if not cards:
            raise AnchorNotFoundError(
                "CLM position links", make_snapshot((), captured_at, summary)
            )

        parsed: list[Position] = []
        for card in cards:
            position = self._parse_card(card, captured_at)
            if position:
                parsed.append(position)
        return make_snapshot(dedupe_by_pair(parsed), captured_at, summary)

    def _parse_card(self, card: Region, captured_at: datetime) -> Position | None:
        text = card.text
        tokens = parser.parse_pair(text)
        if tokens is None:
            return None

        network = parser.find_network(text) or self._network_from_parents(card, tokens)
        if network is None:
            logger.debug("Beefy: no network found for %s", canonical_pair(*tokens))

        values = {
            "pair": canonical_pair(*tokens),
            "token0": tokens[0],
            "token1": tokens[1],
            "network": network,
            "protocol": parser.find_platform(text),
            "balance": parser.first_reasonable_dollar_amount(text),
            "apy": parser.first_reasonable_percentage(text),
            "daily_yield": parser.daily_rate(text),
        }
        return build_position(values, RangeFields(), captured_at)

    def _network_from_parents(self, card: Region, tokens: tuple[str, str]) -> str | None:
        # The chain badge sits beside the link, inside a shared card container.
        for parent in card.parents[:MAX_PARENT_DEPTH]:
            if len(parent.text) >= parser.MAX_NETWORK_CONTAINER_CHARS:
                continue
            if tokens[0] not in parent.text or tokens[1] not in parent.text:
                continue
            network = parser.find_network(parent.text)
            if network:
                return network
        return None

    def _extract_detail(self, page: PageSource, captured_at: datetime) -> Snapshot:
        texts = detail_texts(page)
        values: dict[str, Any] = {}

        for block in page.regions(BLOCK):
            tokens = parser.heading_pair(block.text)
            if tokens:
                values.update(
                    pair=canonical_pair(*tokens), token0=tokens[0], token1=tokens[1]
                )
                break

        chain = scan_texts(texts, parser.CHAIN_RE)
        platform = scan_texts(texts, parser.PLATFORM_LABEL_RE)
        apy = scan_texts(texts, parser.APY_LINE_RE)
        deposit = scan_texts(texts, parser.YOUR_DEPOSIT_RE)
        low = scan_texts(texts, parser.MIN_PRICE_RE)
        high = scan_texts(texts, parser.MAX_PRICE_RE)

        range_min, range_max = ordered_range(
            parse_number(low.group(1)) if low else None,
            parse_number(high.group(1)) if high else None,
        )
        current_price, label_in_range = self._current_price(texts)

        values.update(
            network=chain.group(1) if chain else None,
            protocol=platform.group(1) if platform else None,
            apy=parse_percent(apy.group(1)) if apy else None,
            balance=parse_currency(deposit.group(1)) if deposit else None,
            range_min=range_min,
            range_max=range_max,
            current_price=current_price,
        )

        ranges = range_fields(range_min, range_max, current_price)
        if ranges.in_range is None and label_in_range is not None:
            ranges = RangeFields(
                in_range=label_in_range,
                range_status=IN_RANGE if label_in_range else OUT_OF_RANGE,
            )

        position = build_position(values, ranges, captured_at)
        if position is None:
            logger.warning("Beefy: vault page %s lacks pair or balance", page.address.path)
        return make_snapshot([position] if position else [], captured_at)

    def _current_price(self, texts: list[str]) -> tuple[float | None, bool | None]:
        """Current price and the in-range flag implied by its label, if labelled."""
        for pattern, label in (
            (parser.CURRENT_IN_RANGE_RE, True),
            (parser.CURRENT_OUT_OF_RANGE_RE, False),
            (parser.CURRENT_PRICE_RE, None),
        ):
            match = scan_texts(texts, pattern)
            if match:
                return parse_number(match.group(1)), label
        return None, None
