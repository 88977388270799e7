"""Tests for shared numeric cleanup, range classification and dedupe."""
from __future__ import annotations

import pytest

from clm_capture.models import Position
from clm_capture.normalize import (
    active_flag_fields,
    canonical_pair,
    dedupe_by_pair,
    managed_range_fields,
    ordered_range,
    parse_currency,
    parse_number,
    parse_percent,
    range_fields,
)


# ---------------------------------------------------------------------------
# Number parsing
# ---------------------------------------------------------------------------


class TestParseCurrency:
    def test_thousands_separator(self) -> None:
        assert parse_currency("$1,234.56") == pytest.approx(1234.56)

    def test_k_suffix(self) -> None:
        assert parse_currency("$8.89K") == pytest.approx(8890.0)
        assert parse_currency("$16K") == pytest.approx(16000.0)

    def test_approximation_marks(self) -> None:
        assert parse_currency("~$12") == pytest.approx(12.0)
        assert parse_currency("≈ $3.50") == pytest.approx(3.5)

    def test_zero_is_a_value(self) -> None:
        assert parse_currency("$0.00") == 0.0

    def test_negative(self) -> None:
        assert parse_currency("-$5.25") == pytest.approx(-5.25)

    def test_unparseable(self) -> None:
        assert parse_currency("n/a") is None
        assert parse_currency("$") is None
        assert parse_currency("") is None
        assert parse_currency(None) is None


class TestParseNumberAndPercent:
    def test_number(self) -> None:
        assert parse_number("1,234.5") == pytest.approx(1234.5)
        assert parse_number("abc") is None
        assert parse_number("  ") is None

    def test_non_finite_rejected(self) -> None:
        assert parse_number("inf") is None
        assert parse_number("nan") is None

    def test_percent(self) -> None:
        assert parse_percent("12.5%") == pytest.approx(12.5)
        assert parse_percent("+3%") == pytest.approx(3.0)
        assert parse_percent("%") is None


class TestPairAndRange:
    def test_canonical_pair_keeps_order(self) -> None:
        assert canonical_pair(" SOL", "USDC ") == "SOL/USDC"
        assert canonical_pair("USDC", "SOL") == "USDC/SOL"

    def test_ordered_range_swaps(self) -> None:
        assert ordered_range(20.0, 10.0) == (10.0, 20.0)
        assert ordered_range(10.0, 20.0) == (10.0, 20.0)
        assert ordered_range(None, 5.0) == (None, 5.0)


# ---------------------------------------------------------------------------
# Range classification
# ---------------------------------------------------------------------------


class TestRangeFields:
    def test_in_range_distance_from_center(self) -> None:
        fields = range_fields(10.0, 20.0, 15.0)
        assert fields.in_range is True
        assert fields.range_status == "in-range"
        assert fields.distance_from_range == "+0.00%"

    def test_above_distance_from_upper_bound(self) -> None:
        fields = range_fields(10.0, 20.0, 25.0)
        assert fields.in_range is False
        assert fields.range_status == "above"
        assert fields.distance_from_range == "+25.00%"

    def test_below_distance_from_lower_bound(self) -> None:
        fields = range_fields(10.0, 20.0, 8.0)
        assert fields.in_range is False
        assert fields.range_status == "below"
        assert fields.distance_from_range == "-20.00%"

    def test_bounds_are_inclusive(self) -> None:
        assert range_fields(10.0, 20.0, 10.0).in_range is True
        assert range_fields(10.0, 20.0, 20.0).in_range is True

    def test_incomplete_range_is_unknown(self) -> None:
        fields = range_fields(10.0, None, 15.0)
        assert fields.in_range is None
        assert fields.range_status is None
        assert fields.distance_from_range is None

    def test_zero_bound_has_no_distance(self) -> None:
        fields = range_fields(0.0, 20.0, -1.0)
        assert fields.range_status == "below"
        assert fields.distance_from_range is None

    def test_managed(self) -> None:
        fields = managed_range_fields()
        assert fields.in_range is True
        assert fields.range_status == "alm-managed"

    def test_active_flag(self) -> None:
        assert active_flag_fields(True).range_status == "in-range"
        inactive = active_flag_fields(False)
        assert inactive.in_range is False
        assert inactive.range_status == "out-of-range"


# ---------------------------------------------------------------------------
# Dedupe
# ---------------------------------------------------------------------------


class TestDedupeByPair:
    def test_keeps_largest_balance(self) -> None:
        positions = [
            Position(pair="SOL/USDC", balance=500.0),
            Position(pair="ETH/USDC", balance=50.0),
            Position(pair="SOL/USDC", balance=1234.56),
        ]
        result = dedupe_by_pair(positions)
        assert [p.pair for p in result] == ["SOL/USDC", "ETH/USDC"]
        assert result[0].balance == pytest.approx(1234.56)

    def test_prefer_smallest(self) -> None:
        positions = [
            Position(pair="SUI/USDC", balance=1234.56),
            Position(pair="SUI/USDC", balance=600.0),
        ]
        result = dedupe_by_pair(positions, prefer_smallest=True)
        assert len(result) == 1
        assert result[0].balance == pytest.approx(600.0)

    def test_drops_dust_and_incomplete(self) -> None:
        positions = [
            Position(pair="A/B", balance=0.001),
            Position(pair=None, balance=10.0),
            Position(pair="C/D", balance=None),
            Position(pair="E/F", balance=0.01),
        ]
        result = dedupe_by_pair(positions)
        assert [p.pair for p in result] == ["E/F"]
