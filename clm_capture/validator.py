"""Flags internally inconsistent or implausible records.

Every rule runs; findings accumulate and nothing is corrected.
"""
from __future__ import annotations

import logging

from .models import Position, Snapshot, ValidationReport

logger = logging.getLogger(__name__)

# APY above this (percent) is reported as anomalous, not rejected.
APY_ANOMALY_THRESHOLD = 10_000


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _position_id(position: Position, index: int) -> str:
    return position.pair or f"Position {index + 1}"


def _check_position(
    position: Position, pos_id: str, issues: list[str], warnings: list[str]
) -> None:
    if not position.pair:
        warnings.append(f"{pos_id}: Missing pair name")
    if position.balance is None:
        warnings.append(f"{pos_id}: Missing balance")

    low, high, price = position.range_min, position.range_max, position.current_price
    if low is not None and high is not None:
        if low > high:
            issues.append(f"{pos_id}: Range min ({_fmt(low)}) > range max ({_fmt(high)})")
        if price is not None:
            expected = low <= price <= high
            if position.in_range is not expected:
                issues.append(f"{pos_id}: In-range logic error")

    if position.apy is not None:
        if position.apy > APY_ANOMALY_THRESHOLD:
            warnings.append(f"{pos_id}: Very high APY ({_fmt(position.apy)}%)")
        if position.apy < 0:
            issues.append(f"{pos_id}: Negative APY")

    if position.balance is not None and position.balance < 0:
        issues.append(f"{pos_id}: Negative balance")


def validate(snapshot: Snapshot) -> ValidationReport:
    issues: list[str] = []
    warnings: list[str] = []

    total = snapshot.summary.total_value
    if total is None:
        warnings.append("Missing total portfolio value")
    elif total < 0:
        issues.append("Negative total portfolio value")

    for index, position in enumerate(snapshot.positions):
        _check_position(position, _position_id(position, index), issues, warnings)

    report = ValidationReport(issues=tuple(issues), warnings=tuple(warnings))
    if not report.passed:
        logger.warning("Validation found %d issue(s): %s", len(issues), "; ".join(issues))
    return report
