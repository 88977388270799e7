"""Cetus extractor: card layout, one card per position."""
from __future__ import annotations

import logging
from datetime import datetime

from ...interfaces.page_source import PageSource
from ...models import Position, Snapshot
from ...normalize import active_flag_fields, dedupe_by_pair, range_fields
from ...page import BLOCK
from ..base import AnchorNotFoundError, BaseExtractor, build_position, make_snapshot
from . import parser

logger = logging.getLogger(__name__)


class CetusExtractor(BaseExtractor):
    """Parse Cetus CLMM position cards on SUI."""

    protocol_name = "Cetus"
    hosts = ("cetus.zone",)

    def _extract_listing(self, page: PageSource, captured_at: datetime) -> Snapshot:
        cards = [r for r in page.regions(BLOCK) if parser.is_position_card(r.text)]
        logger.debug("Cetus: found %d candidate cards", len(cards))
        if not cards:
            raise AnchorNotFoundError("position cards", make_snapshot((), captured_at))

        parsed: list[Position] = []
        for card in cards:
            values = parser.parse_card(card.text)
            if values.get("apy") is None:
                logger.debug("Cetus: no APR for %s", values.get("pair"))

            if None in (values["range_min"], values["range_max"], values["current_price"]):
                ranges = active_flag_fields(parser.is_active(card.text))
            else:
                ranges = range_fields(
                    values["range_min"], values["range_max"], values["current_price"]
                )

            position = build_position(values, ranges, captured_at)
            if position:
                parsed.append(position)

        # Nested cards repeat the same pair; the innermost (smallest) one is the lot.
        return make_snapshot(dedupe_by_pair(parsed, prefer_smallest=True), captured_at)
