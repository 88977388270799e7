"""Protocol registry — maps a page address to the extractor that handles it."""
from __future__ import annotations

import logging
from typing import Sequence

from .config import ProtocolConfig
from .interfaces.extractor import Extractor
from .page import PageAddress
from .protocols import (
    AerodromeExtractor,
    BeefyExtractor,
    CetusExtractor,
    HyperionExtractor,
    OrcaExtractor,
    PancakeSwapExtractor,
    RaydiumExtractor,
)

logger = logging.getLogger(__name__)


class ProtocolRegistry:
    """Ordered extractor table; the first extractor whose host test matches wins."""

    def __init__(self, extractors: Sequence[Extractor]) -> None:
        self._extractors = tuple(extractors)

    @property
    def extractors(self) -> tuple[Extractor, ...]:
        return self._extractors

    @property
    def protocol_names(self) -> list[str]:
        return [e.protocol_name for e in self._extractors]

    def detect(self, address: PageAddress) -> Extractor | None:
        for extractor in self._extractors:
            if extractor.detect(address):
                return extractor
        logger.debug("No extractor for host %s", address.host)
        return None


def build_registry(protocols: dict[str, ProtocolConfig] | None = None) -> ProtocolRegistry:
    """Registry in detection order, with per-protocol overrides applied."""
    protocols = protocols or {}
    aerodrome = protocols.get("aerodrome", ProtocolConfig())
    hyperion = protocols.get("hyperion", ProtocolConfig())

    return ProtocolRegistry(
        [
            OrcaExtractor(),
            RaydiumExtractor(),
            AerodromeExtractor(
                token_map=aerodrome.token_map, emission_price=aerodrome.emission_price
            ),
            CetusExtractor(),
            HyperionExtractor(token_map=hyperion.token_map),
            PancakeSwapExtractor(),
            BeefyExtractor(),
        ]
    )
