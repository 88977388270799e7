"""Pure parsing functions for Hyperion list rows and position detail pages."""
from __future__ import annotations

import re
from typing import Any

from ...normalize import canonical_pair, parse_currency, parse_percent

# Aptos coin types / fungible asset addresses to symbols.
DEFAULT_TOKEN_MAP: dict[str, str] = {
    "0x1::aptos_coin::AptosCoin": "APT",
    "0x000000000000000000000000000000000000000000000000000000000000000a": "APT",
    "0xbae207659db88bea0cbead6da0ed00aac12edcdda169e591cd41c94180b46f3b": "USDC",
    "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa": "USDC",
    "0xae478ff7d83ed072dbc5e264250e67ef58f57c99d89b447efd8a0a2e8b2be76e": "WBTC",
}

MIN_ROW_CHARS = 20
MAX_ROW_CHARS = 500

# List rows

ROW_PAIR_RE = re.compile(r"[A-Z]+-[A-Z]+")
ROW_STATUS_RE = re.compile(r"Add / Remove|\bActive\b|\bInactive\b")
ACTIVE_RE = re.compile(r"\bActive\b")
PAIR_RE = re.compile(r"([A-Z][A-Za-z0-9]+)-([A-Z][A-Za-z0-9]+)")
FEE_RE = re.compile(r"([0-9]+\.?[0-9]+)%")
VALUE_K_RE = re.compile(r"\$([0-9]+\.?[0-9]*K)", re.I)
VALUE_RE = re.compile(r"\$([0-9,]+\.?[0-9]*)")
SECOND_PERCENT_RE = re.compile(r"[0-9]+\.?[0-9]+%[\s\S]*?([0-9]+\.?[0-9]+)%")
DOLLAR_AMOUNT_RE = re.compile(r"\$([0-9,]*[0-9]\.?[0-9]*K?)", re.I)

# Detail page, looser patterns after stricter ones

TEXT_PAIR_RE = re.compile(r"([A-Z][A-Za-z0-9]+)\s*[-/]\s*([A-Z][A-Za-z0-9]+)")
PRICE_RANGE_RE = re.compile(
    r"Price\s+Range[:\s]+([0-9]+\.?[0-9]+)\s*~\s*([0-9]+\.?[0-9]+)", re.I
)
MIN_PRICE_RE = re.compile(r"(?:Min|Low|Lower)(?:\s+Price)?[:\s]+([0-9]+\.?[0-9]+)", re.I)
MAX_PRICE_RE = re.compile(r"(?:Max|High|Upper)(?:\s+Price)?[:\s]+([0-9]+\.?[0-9]+)", re.I)
CURRENT_PRICE_RE = re.compile(r"Current\s+Price[:\s]+([0-9]+\.?[0-9]+)", re.I)
VALUE_K_LABEL_RE = re.compile(r"Value[:\s]+\$([0-9]+\.?[0-9]*K)", re.I)
BALANCE_LABEL_RE = re.compile(
    r"(?:Total\s+)?(?:Balance|Value|Liquidity)[:\s]+\$([0-9,]+\.?[0-9]*)", re.I
)
POSITION_APR_RE = re.compile(r"Position\s+APR[^0-9]*([0-9]+\.?[0-9]*)%", re.I)
APR_LABEL_RE = re.compile(r"APR[:\s]+([0-9]+\.?[0-9]*)%", re.I)
CLAIMABLE_RE = re.compile(r"Claimable\s+Rewards[\s\S]*?≈\s*\$([0-9]+\.?[0-9]+)", re.I)
REWARD_LABEL_RE = re.compile(r"(?:Rewards?|Claimable|Pending)[:\s]+\$([0-9]+\.?[0-9]+)", re.I)


def is_position_row(text: str) -> bool:
    return (
        MIN_ROW_CHARS < len(text) < MAX_ROW_CHARS
        and "%" in text
        and ROW_PAIR_RE.search(text) is not None
        and ROW_STATUS_RE.search(text) is not None
    )


def is_active(text: str) -> bool:
    return ACTIVE_RE.search(text) is not None


def parse_row_value(text: str) -> float | None:
    """Row value; ``$16K`` / ``$8.89K`` abbreviations take precedence."""
    match = VALUE_K_RE.search(text) or VALUE_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def second_percentage(text: str) -> float | None:
    """APR is the percentage that follows the fee tier."""
    match = SECOND_PERCENT_RE.search(text)
    return parse_percent(match.group(1)) if match else None


def last_dollar_amount(text: str) -> float | None:
    """Rewards column: the last $ amount, when the row has more than one."""
    amounts = [parse_currency(m.group(1)) for m in DOLLAR_AMOUNT_RE.finditer(text)]
    amounts = [a for a in amounts if a is not None]
    return amounts[-1] if len(amounts) > 1 else None


def parse_row(text: str) -> dict[str, Any]:
    """Parse one list row.

    Example:
        "APT-USDC 0.05% $16K 45.20% Active $194.75 Add / Remove"
    """
    values: dict[str, Any] = {}

    pair = PAIR_RE.search(text)
    if pair:
        values["token0"], values["token1"] = pair.group(1), pair.group(2)
        values["pair"] = canonical_pair(pair.group(1), pair.group(2))

    fee = FEE_RE.search(text)
    values["fee_tier"] = fee.group(1) if fee else None
    values["balance"] = parse_row_value(text)
    values["apy"] = second_percentage(text)
    values["pending_yield"] = last_dollar_amount(text)
    return values


def pair_from_query(
    query: dict[str, str], token_map: dict[str, str]
) -> tuple[str, str] | None:
    """Token symbols from the ``currencyA``/``currencyB`` query parameters."""
    currency_a = query.get("currencyA")
    currency_b = query.get("currencyB")
    if not currency_a or not currency_b:
        return None
    return token_map.get(currency_a, "Token0"), token_map.get(currency_b, "Token1")


def pair_from_text(text: str) -> tuple[str, str] | None:
    match = TEXT_PAIR_RE.search(text)
    return (match.group(1), match.group(2)) if match else None
