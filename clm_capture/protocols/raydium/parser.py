"""Pure parsing functions for the Raydium portfolio section. No I/O."""
from __future__ import annotations

import re
from typing import Any

from ...normalize import canonical_pair, ordered_range, parse_currency, parse_number, parse_percent

SECTION_MARKERS = ("My Position", "Pending Yield", "CLMM", "Current Price")
WALLET_MARKERS = ("Wallet Overview", "$")

PAIR_RE = re.compile(r"([A-Z][A-Za-z0-9]+)\s*/\s*([A-Z][A-Za-z0-9]+)")
BALANCE_RE = re.compile(r"Position\s*\$([0-9,]+\.?[0-9]*)")
APR_RE = re.compile(r"APR\s*([0-9]+\.?[0-9]*)%")
PRICE_RE = re.compile(r"Current Price:\s*([0-9]+\.?[0-9]*)")
RANGE_RE = re.compile(r"([0-9]+\.?[0-9]+)\s*-\s*([0-9]+\.?[0-9]+)")
PENDING_RE = re.compile(r"Pending Yield[^$]*\$([0-9,]+\.?[0-9]*)")
PENDING_LOOSE_RE = re.compile(r"Pending Yield[^\d]*([0-9,]+\.?[0-9]+)")
DOLLAR_RE = re.compile(r"\$([0-9,]+\.?[0-9]*)")


def parse_pending_yield(text: str) -> float | None:
    """Pending yield, preferring a $-prefixed amount over a bare number."""
    match = PENDING_RE.search(text) or PENDING_LOOSE_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def parse_wallet_total(text: str) -> float | None:
    match = DOLLAR_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def parse_section(text: str) -> dict[str, Any]:
    """Parse the single position section.

    Example:
        "SOL/USDC ... Position $1,234.56 ... APR 45.2% ... Current Price: 150.25"
    """
    values: dict[str, Any] = {}

    pair = PAIR_RE.search(text)
    if pair:
        values["token0"], values["token1"] = pair.group(1), pair.group(2)
        values["pair"] = canonical_pair(pair.group(1), pair.group(2))

    balance = BALANCE_RE.search(text)
    values["balance"] = parse_currency(balance.group(1)) if balance else None

    apr = APR_RE.search(text)
    values["apy"] = parse_percent(apr.group(1)) if apr else None

    price = PRICE_RE.search(text)
    values["current_price"] = parse_number(price.group(1)) if price else None

    bounds = RANGE_RE.search(text)
    if bounds:
        values["range_min"], values["range_max"] = ordered_range(
            parse_number(bounds.group(1)), parse_number(bounds.group(2))
        )

    values["pending_yield"] = parse_pending_yield(text)
    return values
