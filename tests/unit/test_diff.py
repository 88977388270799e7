"""Tests for the snapshot-to-snapshot comparison."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from clm_capture.diff import compare
from clm_capture.models import Position, Snapshot, Summary

EARLIER = datetime(2025, 3, 1, 11, 0, tzinfo=timezone.utc)


def _snapshot(*positions: Position, total: float | None = None) -> Snapshot:
    return Snapshot(summary=Summary(total_value=total), positions=positions, captured_at=EARLIER)


def _eth(**kwargs) -> Position:
    defaults = {"pair": "ETH/USDC", "balance": 1000.0, "apy": 10.0}
    defaults.update(kwargs)
    return Position(**defaults)


class TestCompareGuards:
    def test_no_previous(self) -> None:
        assert compare(_snapshot(_eth()), None) is None

    def test_empty_current_reports_removed_pairs(self) -> None:
        report = compare(_snapshot(), _snapshot(_eth()))
        assert report is not None
        assert report.positions_removed == ("ETH/USDC",)
        assert report.positions_added == ()

    def test_empty_previous_reports_added_pairs(self) -> None:
        report = compare(_snapshot(_eth()), _snapshot())
        assert report.positions_added == ("ETH/USDC",)
        assert report.positions_removed == ()

    def test_previous_timestamp_defaults_to_snapshot_time(self) -> None:
        report = compare(_snapshot(_eth()), _snapshot(_eth()))
        assert report is not None
        assert report.previous_timestamp == EARLIER

    def test_unchanged_snapshot_has_no_changes(self) -> None:
        report = compare(_snapshot(_eth()), _snapshot(_eth()))
        assert report.critical_changes == ()
        assert report.significant_changes == ()
        assert report.positions_added == ()
        assert report.positions_removed == ()


class TestPositionChanges:
    def test_balance_increase_is_critical(self) -> None:
        report = compare(_snapshot(_eth(balance=1600.0)), _snapshot(_eth(balance=1000.0)))
        assert "ETH/USDC: Balance increased by 60.0%" in report.critical_changes

    def test_balance_decrease_is_critical(self) -> None:
        report = compare(_snapshot(_eth(balance=400.0)), _snapshot(_eth(balance=1000.0)))
        assert "ETH/USDC: Balance decreased by 60.0%" in report.critical_changes

    def test_small_balance_move_ignored(self) -> None:
        report = compare(_snapshot(_eth(balance=1400.0)), _snapshot(_eth(balance=1000.0)))
        assert report.critical_changes == ()

    def test_added_and_removed_pairs(self) -> None:
        sol = Position(pair="SOL/USDC", balance=50.0)
        report = compare(_snapshot(_eth(), sol), _snapshot(_eth(), Position(pair="BTC/USDC")))
        assert report.positions_added == ("SOL/USDC",)
        assert report.positions_removed == ("BTC/USDC",)

    def test_added_and_removed_are_symmetric(self) -> None:
        a = _snapshot(_eth(), Position(pair="SOL/USDC", balance=50.0))
        b = _snapshot(_eth(), Position(pair="BTC/USDC", balance=50.0))
        forward = compare(a, b)
        backward = compare(b, a)
        assert forward.positions_added == backward.positions_removed
        assert forward.positions_removed == backward.positions_added

    def test_went_out_of_range(self) -> None:
        report = compare(_snapshot(_eth(in_range=False)), _snapshot(_eth(in_range=True)))
        assert "ETH/USDC: Position went OUT OF RANGE" in report.critical_changes

    def test_came_back_in_range(self) -> None:
        report = compare(_snapshot(_eth(in_range=True)), _snapshot(_eth(in_range=False)))
        assert "ETH/USDC: Position came back IN RANGE" in report.significant_changes

    def test_unknown_range_state_is_not_a_transition(self) -> None:
        report = compare(_snapshot(_eth(in_range=False)), _snapshot(_eth(in_range=None)))
        assert report.critical_changes == ()

    def test_apy_swing(self) -> None:
        report = compare(_snapshot(_eth(apy=45.0)), _snapshot(_eth(apy=12.5)))
        assert "ETH/USDC: APY increased from 12.5% to 45.0%" in report.significant_changes

    def test_price_near_boundary(self) -> None:
        current = _eth(range_min=10.0, range_max=20.0, current_price=19.5, in_range=True)
        report = compare(_snapshot(current), _snapshot(_eth()))
        assert "ETH/USDC: Price approaching range boundary" in report.critical_changes

    def test_price_mid_range_not_flagged(self) -> None:
        current = _eth(range_min=10.0, range_max=20.0, current_price=15.0, in_range=True)
        report = compare(_snapshot(current), _snapshot(replace(current)))
        assert report.critical_changes == ()


class TestPortfolioChanges:
    def test_total_value_swing(self) -> None:
        report = compare(_snapshot(_eth(), total=1500.0), _snapshot(_eth(), total=1000.0))
        assert "Total portfolio value increased by 50.0%" in report.significant_changes

    def test_missing_totals_skipped(self) -> None:
        report = compare(_snapshot(_eth(), total=1500.0), _snapshot(_eth(), total=None))
        assert report.significant_changes == ()

    def test_to_dict(self) -> None:
        report = compare(_snapshot(_eth(balance=1600.0)), _snapshot(_eth()))
        data = report.to_dict()
        assert data["criticalChanges"] == ["ETH/USDC: Balance increased by 60.0%"]
        assert data["previousTimestamp"] == EARLIER.isoformat()
