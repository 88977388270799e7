"""Unit tests for frozen data models and their dict round trips."""
from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from clm_capture.models import (
    Capture,
    ExtractionFailure,
    Position,
    PositionStats,
    Snapshot,
    Summary,
    TrackedPosition,
)

TS = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestPosition:
    def test_frozen(self, sample_position: Position) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_position.balance = 1.0  # type: ignore[misc]

    def test_defaults(self) -> None:
        position = Position()
        assert position.pair is None
        assert position.in_range is None
        assert position.is_automated is False

    def test_to_dict_uses_camel_case(self, sample_position: Position) -> None:
        data = sample_position.to_dict()
        assert data["pair"] == "SOL/USDC"
        assert data["pendingYield"] == pytest.approx(12.34)
        assert data["inRange"] is True
        assert data["rangeStatus"] == "in-range"
        assert data["distanceFromRange"] == "+0.00%"
        assert data["isAutomated"] is False
        assert data["capturedAt"] == TS.isoformat()

    def test_from_dict(self) -> None:
        position = Position.from_dict(
            {"pair": "ETH/USDC", "rangeMin": 1.0, "inRange": False, "capturedAt": "2025-03-01T12:00:00Z"}
        )
        assert position.range_min == 1.0
        assert position.in_range is False
        assert position.captured_at == TS

    def test_from_dict_ignores_unknown_keys(self) -> None:
        assert Position.from_dict({"pair": "A/B", "somethingElse": 1}).pair == "A/B"


class TestSnapshot:
    def test_counts(self) -> None:
        snapshot = Snapshot(
            positions=(
                Position(pair="A/B", in_range=True),
                Position(pair="C/D", in_range=False),
                Position(pair="E/F", in_range=None),
            )
        )
        assert snapshot.position_count == 3
        assert snapshot.in_range_count == 1
        assert snapshot.out_of_range_count == 1

    def test_summary_drops_missing_fields(self) -> None:
        assert Summary(total_value=10.0).to_dict() == {"totalValue": 10.0}

    def test_dict_round_trip(self, sample_snapshot: Snapshot) -> None:
        data = sample_snapshot.to_dict()
        assert data["positionCount"] == 1
        assert data["inRangeCount"] == 1
        assert Snapshot.from_dict(data) == sample_snapshot


class TestCapture:
    def test_to_dict(self, sample_snapshot: Snapshot) -> None:
        capture = Capture(
            id="capture_1",
            url="https://www.orca.so/portfolio",
            title="Orca",
            protocol="Orca",
            timestamp=TS,
            snapshot=sample_snapshot,
        )
        data = capture.to_dict()
        assert data["timestamp"] == TS.isoformat()
        assert data["data"]["error"] is None
        assert data["data"]["positions"][0]["pair"] == "SOL/USDC"
        assert Capture.from_dict(data) == capture

    def test_failure_round_trip(self) -> None:
        capture = Capture(
            id="capture_2",
            url="https://app.cetus.zone/",
            title="",
            protocol="Cetus",
            timestamp=TS,
            snapshot=Snapshot(captured_at=TS),
            failure=ExtractionFailure("Cetus", "No page content"),
        )
        restored = Capture.from_dict(capture.to_dict())
        assert restored.failure == ExtractionFailure("Cetus", "No page content")


class TestAggregates:
    def test_stats_to_dict(self) -> None:
        stats = PositionStats(total_positions=2, protocols=("Orca",), pairs=("SOL/USDC", "ETH/USDC"))
        data = stats.to_dict()
        assert data["totalPositions"] == 2
        assert data["protocols"] == ["Orca"]
        assert data["pairs"] == ["SOL/USDC", "ETH/USDC"]

    def test_tracked_position_to_dict(self, sample_position: Position) -> None:
        tracked = TrackedPosition("Orca", "capture_1", TS, sample_position)
        data = tracked.to_dict()
        assert data["protocol"] == "Orca"
        assert data["captureId"] == "capture_1"
        assert data["pair"] == "SOL/USDC"
