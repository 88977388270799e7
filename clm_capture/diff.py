"""Compares a snapshot against the previous one for the same protocol.

Positions are matched by pair identifier only.
"""
from __future__ import annotations

import logging
from datetime import datetime

from .models import ComparisonReport, Position, Snapshot

logger = logging.getLogger(__name__)

# Relative balance move (fraction of the previous balance) that is critical.
BALANCE_CHANGE_CRITICAL = 0.5
# Absolute APY move, in percentage points, that is significant.
APY_CHANGE_SIGNIFICANT = 20.0
# Distance to either bound, as a fraction of the range width, that is critical.
BOUNDARY_PROXIMITY = 0.1
# Relative move of the portfolio total value that is significant.
PORTFOLIO_CHANGE_SIGNIFICANT = 0.2


def _by_pair(positions: tuple[Position, ...]) -> dict[str, Position]:
    return {p.pair: p for p in positions if p.pair}


def _direction(current: float, previous: float) -> str:
    return "increased" if current > previous else "decreased"


def _compare_position(
    pair: str,
    current: Position,
    previous: Position,
    significant: list[str],
    critical: list[str],
) -> None:
    if previous.in_range is True and current.in_range is False:
        critical.append(f"{pair}: Position went OUT OF RANGE")
    if previous.in_range is False and current.in_range is True:
        significant.append(f"{pair}: Position came back IN RANGE")

    if current.balance is not None and previous.balance:
        change = abs(current.balance - previous.balance) / previous.balance
        if change > BALANCE_CHANGE_CRITICAL:
            critical.append(
                f"{pair}: Balance {_direction(current.balance, previous.balance)} "
                f"by {change * 100:.1f}%"
            )

    if current.apy is not None and previous.apy is not None:
        if abs(current.apy - previous.apy) > APY_CHANGE_SIGNIFICANT:
            significant.append(
                f"{pair}: APY {_direction(current.apy, previous.apy)} "
                f"from {previous.apy:.1f}% to {current.apy:.1f}%"
            )

    if _near_boundary(current):
        critical.append(f"{pair}: Price approaching range boundary")


def _near_boundary(position: Position) -> bool:
    low, high, price = position.range_min, position.range_max, position.current_price
    if position.in_range is not True or None in (low, high, price):
        return False
    width = high - low
    if width <= 0:
        return False
    margin = width * BOUNDARY_PROXIMITY
    return abs(price - low) < margin or abs(price - high) < margin


def compare(
    current: Snapshot,
    previous: Snapshot | None,
    previous_timestamp: datetime | None = None,
) -> ComparisonReport | None:
    """Report added/removed pairs and significant/critical changes.

    Returns None when there is nothing to compare against. An empty current
    snapshot is still compared, so every earlier pair shows up as removed.
    Failed captures are screened out by the caller on both sides.
    """
    if previous is None:
        return None

    now = _by_pair(current.positions)
    before = _by_pair(previous.positions)

    significant: list[str] = []
    critical: list[str] = []

    for pair, position in now.items():
        if pair in before:
            _compare_position(pair, position, before[pair], significant, critical)

    current_total = current.summary.total_value
    previous_total = previous.summary.total_value
    if current_total is not None and previous_total:
        change = abs(current_total - previous_total) / previous_total
        if change > PORTFOLIO_CHANGE_SIGNIFICANT:
            significant.append(
                f"Total portfolio value {_direction(current_total, previous_total)} "
                f"by {change * 100:.1f}%"
            )

    report = ComparisonReport(
        positions_added=tuple(p for p in now if p not in before),
        positions_removed=tuple(p for p in before if p not in now),
        significant_changes=tuple(significant),
        critical_changes=tuple(critical),
        previous_timestamp=previous_timestamp or previous.captured_at,
    )
    logger.debug(
        "Compared %d positions: %d critical, %d significant",
        len(now),
        len(critical),
        len(significant),
    )
    return report
