"""Tests for protocol detection order and per-protocol config wiring."""
from __future__ import annotations

import pytest

from clm_capture.config import ProtocolConfig
from clm_capture.page import PageAddress
from clm_capture.protocols import BaseExtractor
from clm_capture.registry import ProtocolRegistry, build_registry


class TestBuildRegistry:
    def test_declared_order(self) -> None:
        assert build_registry().protocol_names == [
            "Orca",
            "Raydium",
            "Aerodrome",
            "Cetus",
            "Hyperion",
            "PancakeSwap",
            "Beefy",
        ]

    @pytest.mark.parametrize(
        ("url", "protocol"),
        [
            ("https://www.orca.so/portfolio", "Orca"),
            ("https://raydium.io/portfolio/", "Raydium"),
            ("https://aerodrome.finance/dash", "Aerodrome"),
            ("https://app.cetus.zone/liquidity/positions", "Cetus"),
            ("https://app.hyperion.xyz/positions", "Hyperion"),
            ("https://pancakeswap.finance/liquidity/123", "PancakeSwap"),
            ("https://app.beefy.com/dashboard", "Beefy"),
        ],
    )
    def test_detects_each_protocol(self, url: str, protocol: str) -> None:
        extractor = build_registry().detect(PageAddress.from_url(url))
        assert extractor is not None
        assert extractor.protocol_name == protocol

    def test_unsupported_host(self) -> None:
        assert build_registry().detect(PageAddress.from_url("https://example.com/")) is None

    def test_protocol_config_applied(self) -> None:
        registry = build_registry({"aerodrome": ProtocolConfig(emission_price=2.0)})
        aerodrome = registry.detect(PageAddress.from_url("https://aerodrome.finance/"))
        assert aerodrome._emission_price == 2.0


class _Stub(BaseExtractor):
    def __init__(self, name: str, hosts: tuple[str, ...]) -> None:
        self.protocol_name = name
        self.hosts = hosts

    def _extract_listing(self, page, captured_at):
        raise NotImplementedError


class TestProtocolRegistry:
    def test_first_match_wins(self) -> None:
        registry = ProtocolRegistry([_Stub("first", ("example",)), _Stub("second", ("example.com",))])
        extractor = registry.detect(PageAddress.from_url("https://example.com/"))
        assert extractor.protocol_name == "first"
