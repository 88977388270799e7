"""Aerodrome extractor — one position per deposit link, keyed by token addresses."""
from __future__ import annotations

import logging
from datetime import datetime

from ...interfaces.page_source import PageSource
from ...models import Position, Snapshot
from ...normalize import canonical_pair, dedupe_by_pair, managed_range_fields, range_fields
from ...page import LINK, Region
from ..base import (
    AnchorNotFoundError,
    BaseExtractor,
    build_position,
    enclosing_region,
    make_snapshot,
)
from . import parser

logger = logging.getLogger(__name__)


class AerodromeExtractor(BaseExtractor):
    """Parse Aerodrome Slipstream (CL) deposits on Base."""

    protocol_name = "Aerodrome"
    hosts = ("aerodrome.finance",)

    def __init__(
        self, token_map: dict[str, str] | None = None, emission_price: float = 1.0
    ) -> None:
        self._token_map = dict(parser.DEFAULT_TOKEN_MAP)
        self._token_map.update({k.lower(): v for k, v in (token_map or {}).items()})
        self._emission_price = emission_price

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        links = [r for r in page.regions(LINK) if parser.DEPOSIT_LINK in r.href]
        logger.debug("Aerodrome: found %d deposit links", len(links))
        if not links:
            raise AnchorNotFoundError("deposit links", make_snapshot((), captured_at))

        parsed: list[Position] = []
        for link in links:
            position = self._parse_deposit(link, captured_at)
            if position:
                parsed.append(position)
        return make_snapshot(dedupe_by_pair(parsed), captured_at)

    def _parse_deposit(self, link: Region, captured_at: datetime) -> Position | None:
        addresses = parser.token_addresses(link.href)
        if addresses is None:
            return None
        token0 = parser.resolve_token(addresses[0], self._token_map)
        token1 = parser.resolve_token(addresses[1], self._token_map)
        pair = canonical_pair(token0, token1)

        container = enclosing_region(link, parser.CONTAINER_MARKERS)
        if container is None:
            logger.debug("Aerodrome: no deposit container for %s", pair)
            return None
        text = container.text

        values = {
            "pair": pair,
            "token0": token0,
            "token1": token1,
            "balance": parser.parse_deposited(text),
            "apy": parser.highest_apr(text),
            "pending_yield": parser.pending_rewards_usd(text, self._emission_price),
        }

        if parser.is_automated(text, (link.href, *container.hrefs)):
            values["is_automated"] = True
            return build_position(values, managed_range_fields(), captured_at)

        range_min, range_max = parser.parse_range(text)
        current_price = parser.parse_current_price(text)
        values.update(range_min=range_min, range_max=range_max, current_price=current_price)
        return build_position(
            values, range_fields(range_min, range_max, current_price), captured_at
        )
