"""Raydium extractor: a single CLMM position section anchored on its labels."""
from __future__ import annotations

import logging
from datetime import datetime

from ...interfaces.page_source import PageSource
from ...models import Snapshot, Summary
from ...normalize import dedupe_by_pair, range_fields
from ...page import BLOCK
from ..base import (
    AnchorNotFoundError,
    BaseExtractor,
    build_position,
    make_snapshot,
    smallest_region,
)
from . import parser

logger = logging.getLogger(__name__)


class RaydiumExtractor(BaseExtractor):
    """Parse the Raydium CLMM position shown on the portfolio page."""

    protocol_name = "Raydium"
    hosts = ("raydium.io",)

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        blocks = page.regions(BLOCK)

        wallet = smallest_region(blocks, parser.WALLET_MARKERS)
        total_value = parser.parse_wallet_total(wallet.text) if wallet else None

        section = smallest_region(blocks, parser.SECTION_MARKERS)
        if section is None:
            raise AnchorNotFoundError(
                "position section",
                make_snapshot((), captured_at, Summary(total_value=total_value)),
            )

        summary = Summary(
            total_value=total_value,
            pending_yield=parser.parse_pending_yield(section.text),
        )
        values = parser.parse_section(section.text)
        ranges = range_fields(
            values.get("range_min"), values.get("range_max"), values.get("current_price")
        )
        position = build_position(values, ranges, captured_at)
        if position is None:
            logger.debug("Raydium: position section lacks pair or balance")
        return make_snapshot(
            dedupe_by_pair([position] if position else []), captured_at, summary
        )
