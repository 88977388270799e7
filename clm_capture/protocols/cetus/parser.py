"""Pure parsing functions for Cetus position cards. No I/O."""
from __future__ import annotations

import re
from typing import Any

from ...normalize import canonical_pair, ordered_range, parse_currency, parse_number, parse_percent

MIN_CARD_CHARS = 50
MAX_CARD_CHARS = 2000

CARD_PAIR_RE = re.compile(r"[A-Z]+\s*-\s*[A-Z]+")
PAIR_RE = re.compile(r"([A-Z][A-Za-z0-9]+)\s*-\s*([A-Z][A-Za-z0-9]+)")
FEE_RE = re.compile(r"([0-9]+\.?[0-9]+)%(?!\s*APR)")
LIQUIDITY_RE = re.compile(r"Liquidity[\s\S]*?\$([0-9,]+\.?[0-9]*)", re.I)
APR_RE = re.compile(r"APR[\s\S]*?([0-9]+\.?[0-9]*)%", re.I)
CLAIMABLE_RE = re.compile(r"Claimable Yield[\s\S]*?\$([0-9,]+\.?[0-9]*)", re.I)
RANGE_RE = re.compile(
    r"Price Range[\s\S]*?([0-9]+\.?[0-9]+)\s*-\s*([0-9]+\.?[0-9]+)", re.I
)
PRICE_RE = re.compile(r"Current Price[\s\S]*?([0-9]+\.?[0-9]+)", re.I)
ACTIVE_RE = re.compile(r"\bActive\b")


def is_position_card(text: str) -> bool:
    return (
        MIN_CARD_CHARS < len(text) < MAX_CARD_CHARS
        and "APR" in text
        and "Liquidity" in text
        and CARD_PAIR_RE.search(text) is not None
    )


def is_active(text: str) -> bool:
    return ACTIVE_RE.search(text) is not None


def parse_card(text: str) -> dict[str, Any]:
    """Parse one card.

    Example:
        "SUI - USDC 0.25% Liquidity $1,234.56 APR 45.2% Price Range 1.99 - 4.00"
    """
    values: dict[str, Any] = {}

    pair = PAIR_RE.search(text)
    if pair:
        values["token0"], values["token1"] = pair.group(1), pair.group(2)
        values["pair"] = canonical_pair(pair.group(1), pair.group(2))

    fee = FEE_RE.search(text)
    values["fee_tier"] = fee.group(1) if fee else None

    liquidity = LIQUIDITY_RE.search(text)
    values["balance"] = parse_currency(liquidity.group(1)) if liquidity else None

    apr = APR_RE.search(text)
    values["apy"] = parse_percent(apr.group(1)) if apr else None

    claimable = CLAIMABLE_RE.search(text)
    values["pending_yield"] = parse_currency(claimable.group(1)) if claimable else None

    bounds = RANGE_RE.search(text)
    values["range_min"], values["range_max"] = (
        ordered_range(parse_number(bounds.group(1)), parse_number(bounds.group(2)))
        if bounds
        else (None, None)
    )

    price = PRICE_RE.search(text)
    values["current_price"] = parse_number(price.group(1)) if price else None
    return values
