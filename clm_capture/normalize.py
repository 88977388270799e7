"""Shared numeric/string cleanup used by every protocol extractor — no I/O.

Every parser returns ``None`` when the input cannot be read. Zero is a valid
observation and is never used as a stand-in for "unknown".
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .models import ABOVE, ALM_MANAGED, BELOW, IN_RANGE, OUT_OF_RANGE, Position

# Balances below this (USD) are closed or dust positions.
DUST_THRESHOLD = 0.01

_CURRENCY_PREFIXES = "~\u2248$ \u00a0"


def _to_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_number(text: str | None) -> float | None:
    """Parse a plain number, dropping thousands separators.

    Examples:
        "1,234.5" → 1234.5
        "abc" → None
    """
    if text is None:
        return None
    cleaned = text.strip().replace(",", "")
    if not cleaned:
        return None
    return _to_float(cleaned)


def parse_currency(text: str | None) -> float | None:
    """Parse a currency string into a USD magnitude.

    Strips thousands separators and a leading currency symbol (also the
    approximation marks ``~`` and ``≈``). A trailing ``K`` multiplies by 1,000.

    Examples:
        "$1,234.56" → 1234.56
        "$8.89K" → 8890.0
        "~$12" → 12.0
    """
    if text is None:
        return None
    cleaned = text.strip().replace(",", "")
    negative = cleaned.startswith("-")
    if negative:
        cleaned = cleaned[1:]
    cleaned = cleaned.lstrip(_CURRENCY_PREFIXES)

    multiplier = 1.0
    if cleaned[-1:] in ("K", "k"):
        multiplier = 1000.0
        cleaned = cleaned[:-1]
    if not cleaned:
        return None

    value = _to_float(cleaned)
    if value is None:
        return None
    value *= multiplier
    return -value if negative else value


def parse_percent(text: str | None) -> float | None:
    """Parse a percentage string, dropping the trailing ``%``.

    Examples:
        "12.5%" → 12.5
        "+3%" → 3.0
    """
    if text is None:
        return None
    cleaned = text.strip().rstrip("%").strip().replace(",", "")
    if not cleaned:
        return None
    return _to_float(cleaned)


def canonical_pair(token0: str, token1: str) -> str:
    """Canonical ``TOKEN0/TOKEN1`` identifier, in observed order."""
    return f"{token0.strip()}/{token1.strip()}"


def ordered_range(
    low: float | None, high: float | None
) -> tuple[float | None, float | None]:
    """Return the bounds as (min, max), swapping text ordered max-then-min."""
    if low is not None and high is not None and low > high:
        return high, low
    return low, high


@dataclass(frozen=True)
class RangeFields:
    """Range-derived position fields."""

    in_range: bool | None = None
    range_status: str | None = None
    distance_from_range: str | None = None


def _signed_percent(value: float) -> str:
    return f"{value + 0.0:+.2f}%"


def _relative(delta: float, base: float) -> str | None:
    if base == 0:
        return None
    return _signed_percent(delta / base * 100)


def range_fields(
    range_min: float | None,
    range_max: float | None,
    current_price: float | None,
) -> RangeFields:
    """Compute in-range flag, status and signed distance.

    Out of range, the distance is measured from the nearer boundary relative to
    that boundary: ``(25 - 20) / 20`` → ``"+25.00%"``. In range, it is measured
    from the range center relative to the center.
    """
    if range_min is None or range_max is None or current_price is None:
        return RangeFields()

    if current_price < range_min:
        return RangeFields(
            in_range=False,
            range_status=BELOW,
            distance_from_range=_relative(current_price - range_min, range_min),
        )
    if current_price > range_max:
        return RangeFields(
            in_range=False,
            range_status=ABOVE,
            distance_from_range=_relative(current_price - range_max, range_max),
        )

    center = (range_min + range_max) / 2
    return RangeFields(
        in_range=True,
        range_status=IN_RANGE,
        distance_from_range=_relative(current_price - center, center),
    )


def managed_range_fields() -> RangeFields:
    """Automated/managed positions are in range by construction."""
    return RangeFields(in_range=True, range_status=ALM_MANAGED)


def active_flag_fields(active: bool) -> RangeFields:
    """Status from an Active/Inactive marker when no price range is available."""
    return RangeFields(
        in_range=active,
        range_status=IN_RANGE if active else OUT_OF_RANGE,
    )


def dedupe_by_pair(
    positions: Iterable[Position],
    prefer_smallest: bool = False,
    min_balance: float = DUST_THRESHOLD,
) -> tuple[Position, ...]:
    """Collapse repeated occurrences of one pair into a single position.

    Keeps the occurrence with the greatest balance (or the smallest, for
    layouts that report sub-lots), drops balances below ``min_balance`` and
    keeps the order in which pairs were first seen.
    """
    chosen: dict[str, Position] = {}
    for pos in positions:
        if pos.pair is None or pos.balance is None or pos.balance < min_balance:
            continue
        existing = chosen.get(pos.pair)
        if existing is None:
            chosen[pos.pair] = pos
            continue
        kept = existing.balance or 0.0
        better = pos.balance < kept if prefer_smallest else pos.balance > kept
        if better:
            chosen[pos.pair] = pos
    return tuple(chosen.values())
