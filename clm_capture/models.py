"""Data models — all frozen (immutable).

Attribute names are snake_case; ``to_dict`` / ``from_dict`` use the camelCase
field names the presentation layer and the capture stores consume.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

IN_RANGE = "in-range"
OUT_OF_RANGE = "out-of-range"
BELOW = "below"
ABOVE = "above"
ALM_MANAGED = "alm-managed"

RANGE_STATUSES = (IN_RANGE, OUT_OF_RANGE, BELOW, ABOVE, ALM_MANAGED)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _flat_to_dict(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        out[_camel(f.name)] = value
    return out


def _flat_kwargs(cls: type, raw: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        key = _camel(f.name)
        if key in raw:
            kwargs[f.name] = raw[key]
        elif f.name in raw:
            kwargs[f.name] = raw[f.name]
    return kwargs


@dataclass(frozen=True)
class Position:
    """One liquidity position observed at a point in time."""

    pair: str | None = None
    token0: str | None = None
    token1: str | None = None
    balance: float | None = None
    pending_yield: float | None = None
    apy: float | None = None
    range_min: float | None = None
    range_max: float | None = None
    current_price: float | None = None
    in_range: bool | None = None
    range_status: str | None = None
    distance_from_range: str | None = None
    network: str | None = None
    fee_tier: str | None = None
    protocol: str | None = None
    is_automated: bool = False
    range_min_percent: str | None = None
    range_max_percent: str | None = None
    daily_yield: str | None = None
    captured_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _flat_to_dict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Position:
        kwargs = _flat_kwargs(cls, raw)
        kwargs["captured_at"] = _parse_dt(kwargs.get("captured_at"))
        return cls(**kwargs)


@dataclass(frozen=True)
class Summary:
    """Protocol-level aggregates; every field is optional and protocol-dependent."""

    total_value: float | None = None
    pending_yield: float | None = None
    average_apy: float | None = None
    estimated_yield_amount: float | None = None
    estimated_yield_percent: float | None = None
    daily_yield: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in _flat_to_dict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> Summary:
        return cls(**_flat_kwargs(cls, raw or {}))


@dataclass(frozen=True)
class Snapshot:
    """Output of one extraction pass."""

    summary: Summary = field(default_factory=Summary)
    positions: tuple[Position, ...] = ()
    captured_at: datetime | None = None

    @property
    def position_count(self) -> int:
        return len(self.positions)

    @property
    def in_range_count(self) -> int:
        return sum(1 for p in self.positions if p.in_range is True)

    @property
    def out_of_range_count(self) -> int:
        return sum(1 for p in self.positions if p.in_range is False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "positions": [p.to_dict() for p in self.positions],
            "positionCount": self.position_count,
            "inRangeCount": self.in_range_count,
            "outOfRangeCount": self.out_of_range_count,
            "capturedAt": _iso(self.captured_at),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> Snapshot:
        raw = raw or {}
        return cls(
            summary=Summary.from_dict(raw.get("summary")),
            positions=tuple(Position.from_dict(p) for p in raw.get("positions", [])),
            captured_at=_parse_dt(raw.get("capturedAt")),
        )


@dataclass(frozen=True)
class ExtractionFailure:
    """Per-protocol extraction error note."""

    protocol: str
    error: str


@dataclass(frozen=True)
class Capture:
    """A Snapshot plus provenance."""

    id: str
    url: str
    title: str
    protocol: str
    timestamp: datetime
    snapshot: Snapshot = field(default_factory=Snapshot)
    failure: ExtractionFailure | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.snapshot.to_dict()
        data["error"] = self.failure.error if self.failure else None
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "protocol": self.protocol,
            "timestamp": self.timestamp.isoformat(),
            "data": data,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Capture:
        protocol = raw.get("protocol") or ""
        error = (raw.get("data") or {}).get("error")
        return cls(
            id=raw["id"],
            url=raw.get("url", ""),
            title=raw.get("title") or "",
            protocol=protocol,
            timestamp=_parse_dt(raw["timestamp"]),
            snapshot=Snapshot.from_dict(raw.get("data")),
            failure=ExtractionFailure(protocol, error) if error else None,
        )


@dataclass(frozen=True)
class ValidationReport:
    issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "issues": list(self.issues),
            "warnings": list(self.warnings),
            "passed": self.passed,
        }


@dataclass(frozen=True)
class ComparisonReport:
    positions_added: tuple[str, ...] = ()
    positions_removed: tuple[str, ...] = ()
    significant_changes: tuple[str, ...] = ()
    critical_changes: tuple[str, ...] = ()
    previous_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "positionsAdded": list(self.positions_added),
            "positionsRemoved": list(self.positions_removed),
            "significantChanges": list(self.significant_changes),
            "criticalChanges": list(self.critical_changes),
            "previousTimestamp": _iso(self.previous_timestamp),
        }


@dataclass(frozen=True)
class PositionStats:
    """Aggregate view over the latest position per (protocol, pair)."""

    total_positions: int = 0
    in_range_count: int = 0
    out_of_range_count: int = 0
    total_value: float = 0.0
    total_pending_yield: float = 0.0
    avg_apy: float = 0.0
    protocols: tuple[str, ...] = ()
    pairs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out = _flat_to_dict(self)
        out["protocols"] = list(self.protocols)
        out["pairs"] = list(self.pairs)
        return out


@dataclass(frozen=True)
class TrackedPosition:
    """A stored position together with the capture it came from."""

    protocol: str
    capture_id: str
    captured_at: datetime
    position: Position

    def to_dict(self) -> dict[str, Any]:
        out = self.position.to_dict()
        out.update(
            protocol=self.protocol,
            captureId=self.capture_id,
            capturedAt=self.captured_at.isoformat(),
        )
        return out
