"""Tests for Orca table cell parsing (pure functions, no I/O)."""
from __future__ import annotations

import pytest

from clm_capture.protocols.orca import parser


class TestParsePool:
    def test_pair_and_fee(self) -> None:
        assert parser.parse_pool("SOL/USDC\n0.25%") == ("SOL", "USDC", "0.25")

    def test_spaced_slash(self) -> None:
        assert parser.parse_pool("JUP / SOL 1%") == ("JUP", "SOL", "1")

    def test_no_slash_is_not_a_pool(self) -> None:
        assert parser.parse_pool("Pool") == (None, None, None)

    def test_missing_fee(self) -> None:
        assert parser.parse_pool("SOL/USDC") == ("SOL", "USDC", None)


class TestCellValues:
    def test_dollar_needs_cents(self) -> None:
        assert parser.parse_dollar("$1,234.56") == pytest.approx(1234.56)
        assert parser.parse_dollar("$12") is None

    def test_apy(self) -> None:
        assert parser.parse_apy("12.5%") == pytest.approx(12.5)
        assert parser.parse_apy("-") is None

    def test_price(self) -> None:
        assert parser.parse_price("15.0") == pytest.approx(15.0)
        assert parser.parse_price("1,500.25 USDC per SOL") == pytest.approx(1500.25)


class TestParseRangeCell:
    def test_bounds_and_percentages(self) -> None:
        cell = parser.parse_range_cell("10.0\n-33.33%\n20.0\n+33.33%")
        assert cell.range_min == pytest.approx(10.0)
        assert cell.range_max == pytest.approx(20.0)
        assert cell.min_percent == "-33.33%"
        assert cell.max_percent == "+33.33%"

    def test_swapped_bounds_are_ordered(self) -> None:
        cell = parser.parse_range_cell("20.0\n10.0")
        assert (cell.range_min, cell.range_max) == (10.0, 20.0)

    def test_single_number_is_no_range(self) -> None:
        cell = parser.parse_range_cell("10.0")
        assert cell.range_min is None
        assert cell.range_max is None
        assert cell.min_percent is None


class TestEstimatedYield:
    def test_amount_and_percent(self) -> None:
        amount, percent = parser.parse_estimated_yield("Estimated Yield\n$45.67\n1.83%")
        assert amount == pytest.approx(45.67)
        assert percent == pytest.approx(1.83)

    def test_missing(self) -> None:
        assert parser.parse_estimated_yield("Estimated Yield") == (None, None)
