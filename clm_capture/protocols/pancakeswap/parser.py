"""Pure parsing functions for PancakeSwap position rows and detail pages."""
from __future__ import annotations

import re

from ...normalize import ordered_range, parse_currency, parse_number, parse_percent

MIN_ROW_CELLS = 3
MAX_HEADING_CHARS = 30

PAIR_RE = re.compile(r"([A-Za-z0-9]+)[\s\-/]+([A-Za-z0-9]+)")
DOLLAR_RE = re.compile(r"\$([0-9,]+\.?[0-9]*)")
PERCENT_RE = re.compile(r"([0-9]+\.?[0-9]*)%")
PENDING_RE = re.compile(r"(?:Pending|Unclaimed|Rewards?)[^$]*\$([0-9,]+\.?[0-9]*)", re.I)
AMOUNT_OR_PERCENT_RE = re.compile(r"\$[0-9,]+\.?[0-9]*K?|[0-9]+\.?[0-9]*%")
BARE_NUMBER_RE = re.compile(r"(?<![A-Za-z0-9.,])[0-9][0-9,]*(?:\.[0-9]+)?")

HEADING_PAIR_RE = re.compile(r"^([A-Z][A-Za-z0-9]+)[-/]([A-Z][A-Za-z0-9]+)$")
BALANCE_LABEL_RE = re.compile(
    r"(?:Liquidity|Value|Position Value)[:\s]+\$([0-9,]+\.?[0-9]*)", re.I
)
APR_LABEL_RE = re.compile(r"APR[^0-9]*([0-9]+\.?[0-9]*)%", re.I)
UNCLAIMED_RE = re.compile(r"Unclaimed\s+Fees[:\s]+\$([0-9,]+\.?[0-9]+)", re.I)
MIN_PRICE_RE = re.compile(r"Min\s+Price[:\s]+([0-9,]+\.?[0-9]+)", re.I)
MAX_PRICE_RE = re.compile(r"Max\s+Price[:\s]+([0-9,]+\.?[0-9]+)", re.I)
CURRENT_PRICE_RE = re.compile(r"Current\s+Price[:\s]+([0-9,]+\.?[0-9]+)", re.I)


def parse_pair(*texts: str) -> tuple[str, str] | None:
    """Tokens from the first text holding a ``A-B`` / ``A / B`` pair."""
    for text in texts:
        match = PAIR_RE.search(text)
        if match:
            return match.group(1), match.group(2)
    return None


def first_dollar_amount(text: str) -> float | None:
    """Balance column: the first $ amount in the row."""
    match = DOLLAR_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def first_percentage(text: str) -> float | None:
    """APR column: the first percentage in the row."""
    match = PERCENT_RE.search(text)
    return parse_percent(match.group(1)) if match else None


def pending_amount(text: str) -> float | None:
    match = PENDING_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def range_triplet(text: str) -> tuple[float, float, float] | None:
    """Min, max and current price from the bare numbers left in a row.

    Dollar amounts and percentages are removed first; the remaining distinct
    numbers, in order, are read as range min, range max and current price.
    Fewer than three distinct numbers means no range on the row.
    """
    stripped = AMOUNT_OR_PERCENT_RE.sub(" ", text)
    numbers: list[float] = []
    for raw in BARE_NUMBER_RE.findall(stripped):
        value = parse_number(raw)
        if value is not None and value not in numbers:
            numbers.append(value)
    if len(numbers) < 3:
        return None
    range_min, range_max = ordered_range(numbers[0], numbers[1])
    return range_min, range_max, numbers[2]


def heading_pair(text: str) -> tuple[str, str] | None:
    """Pair from a short heading such as ``WETH-USDC``."""
    text = text.strip()
    if len(text) >= MAX_HEADING_CHARS:
        return None
    match = HEADING_PAIR_RE.match(text)
    return (match.group(1), match.group(2)) if match else None
