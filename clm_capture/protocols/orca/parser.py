"""Pure parsing functions for Orca portfolio tables — no I/O."""
from __future__ import annotations

import re
from dataclasses import dataclass

from ...normalize import ordered_range, parse_currency, parse_number, parse_percent

# Pool, balance, pending yield, APY, range, current price.
MIN_ROW_CELLS = 6

POOL_RE = re.compile(r"([A-Za-z0-9]+)\s*/\s*([A-Za-z0-9]+)")
PERCENT_RE = re.compile(r"([0-9.]+)%")
DOLLAR_RE = re.compile(r"\$([0-9,]+\.[0-9]{2})")
SIGNED_PERCENT_RE = re.compile(r"([+-]?[0-9.]+%)")
NUMBER_RE = re.compile(r"[0-9][0-9,]*(?:\.[0-9]+)?")

TOTAL_VALUE_MARKERS = ("Total Value", "$")
ESTIMATED_YIELD_MARKERS = ("Estimated Yield", "%")
PENDING_YIELD_MARKERS = ("Pending Yield", "$")


@dataclass(frozen=True)
class RangeCell:
    range_min: float | None = None
    range_max: float | None = None
    min_percent: str | None = None
    max_percent: str | None = None


def parse_pool(text: str) -> tuple[str | None, str | None, str | None]:
    """Return (token0, token1, fee tier) from the pool cell.

    Example:
        "SOL/USDC 0.25%" → ("SOL", "USDC", "0.25")
    """
    if "/" not in text:
        return None, None, None
    pool = POOL_RE.search(text)
    fee = PERCENT_RE.search(text)
    token0, token1 = (pool.group(1), pool.group(2)) if pool else (None, None)
    return token0, token1, fee.group(1) if fee else None


def parse_dollar(text: str) -> float | None:
    match = DOLLAR_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def parse_apy(text: str) -> float | None:
    match = PERCENT_RE.search(text)
    return parse_percent(match.group(1)) if match else None


def parse_range_cell(text: str) -> RangeCell:
    """Parse the range cell: one value per line, percentage lines carry the
    distance of each bound from the current price."""
    lines = [line.strip() for line in re.split(r"[\n\r]+", text) if line.strip()]

    numbers: list[float] = []
    percents: list[str] = []
    for line in lines:
        if "%" in line:
            percents.extend(SIGNED_PERCENT_RE.findall(line))
            continue
        for raw in NUMBER_RE.findall(line):
            value = parse_number(raw)
            if value is not None and value not in numbers:
                numbers.append(value)

    percents = [p for p in percents if re.match(r"^[+-]?\d", p)]

    range_min, range_max = (None, None)
    if len(numbers) >= 2:
        range_min, range_max = ordered_range(numbers[0], numbers[1])

    return RangeCell(
        range_min=range_min,
        range_max=range_max,
        min_percent=percents[0] if len(percents) >= 2 else None,
        max_percent=percents[1] if len(percents) >= 2 else None,
    )


def parse_price(text: str) -> float | None:
    match = NUMBER_RE.search(text)
    return parse_number(match.group(0)) if match else None


def parse_estimated_yield(text: str) -> tuple[float | None, float | None]:
    """Return (amount, percent) from the estimated-yield block."""
    amount = DOLLAR_RE.search(text)
    percent = re.search(r"([0-9]+\.[0-9]+)%", text)
    return (
        parse_currency(amount.group(1)) if amount else None,
        parse_percent(percent.group(1)) if percent else None,
    )
