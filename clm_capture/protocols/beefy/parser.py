"""Pure parsing functions for Beefy CLM dashboard cards and vault pages."""
from __future__ import annotations

import re

from ...normalize import parse_currency, parse_percent

MIN_CARD_CHARS = 30
MAX_CARD_CHARS = 1000
# Enclosing regions larger than this are page-level and not searched for a network.
MAX_NETWORK_CONTAINER_CHARS = 2000
MAX_HEADING_CHARS = 30

# A single position never exceeds this (USD); larger figures are TVL.
MAX_POSITION_BALANCE = 1_000_000_000
# Percentages outside (MIN_APY, MAX_APY) are daily rates or fee tiers.
MIN_APY = 1.0
MAX_APY = 1000.0

VAULT_LINK = "vault"
# Beefy renders pairs with assorted dash characters, sometimes with a zero-width space.
DASHES = r"[\-\u2013\u2014\u200b]+"

NETWORK_RE = re.compile(
    r"\b(Arbitrum|Base|Optimism|Polygon|Ethereum|BSC|Avalanche|Fantom)\b", re.I
)
PLATFORM_RE = re.compile(r"\b(Uniswap|PancakeSwap|SushiSwap|Balancer|Curve)\b", re.I)
PAIR_RE = re.compile(rf"([a-z]*[A-Z][A-Za-z0-9]+){DASHES}([a-z]*[A-Z][A-Za-z0-9]+)")
CLM_RE = re.compile(r"CLM", re.I)
CARD_DOLLAR_RE = re.compile(r"\$[0-9,]+")
DOLLAR_RE = re.compile(r"\$([0-9,]+\.?[0-9]*)")
PERCENT_RE = re.compile(r"([0-9]+\.?[0-9]+)%")
DAILY_RATE_RE = re.compile(r"0\.0*[0-9]+%")

DEPOSITED_RE = re.compile(r"Deposited[:\s]+\$([0-9,]+\.?[0-9]*)", re.I)
AVG_APY_RE = re.compile(r"Avg\.?\s+APY[:\s]+([0-9]+\.?[0-9]*)%", re.I)
DAILY_YIELD_RE = re.compile(r"Daily\s+yield[:\s]+\$([0-9.]+)", re.I)

HEADING_PAIR_RE = re.compile(rf"^([A-Z][A-Za-z0-9]+){DASHES}([A-Z][A-Za-z0-9]+)$")
CHAIN_RE = re.compile(r"CHAIN:\s*(Arbitrum|Base|Optimism|Polygon|Ethereum|BSC)", re.I)
PLATFORM_LABEL_RE = re.compile(
    r"PLATFORM:\s*(Uniswap|PancakeSwap|SushiSwap|Balancer|Curve)", re.I
)
APY_LINE_RE = re.compile(r"^APY\s+([0-9]+\.?[0-9]*)%$", re.I | re.M)
YOUR_DEPOSIT_RE = re.compile(r"Your Deposit[\s\S]*?\$([0-9,]+\.?[0-9]*)", re.I)
MIN_PRICE_RE = re.compile(r"Min Price\s+([0-9]+\.?[0-9]+)", re.I)
MAX_PRICE_RE = re.compile(r"Max Price\s+([0-9]+\.?[0-9]+)", re.I)
CURRENT_IN_RANGE_RE = re.compile(r"Current Price\s*\(In Range\)\s+([0-9]+\.?[0-9]+)", re.I)
CURRENT_OUT_OF_RANGE_RE = re.compile(
    r"Current Price\s*\(Out of Range\)\s+([0-9]+\.?[0-9]+)", re.I
)
CURRENT_PRICE_RE = re.compile(r"Current Price\s+([0-9]+\.?[0-9]+)", re.I)


def is_position_card(text: str, href: str) -> bool:
    return (
        VAULT_LINK in href
        and MIN_CARD_CHARS < len(text) < MAX_CARD_CHARS
        and CLM_RE.search(text) is not None
        and CARD_DOLLAR_RE.search(text) is not None
    )


def parse_pair(text: str) -> tuple[str, str] | None:
    """Tokens from a card, keeping lowercase prefixes such as ``cbBTC``."""
    match = PAIR_RE.search(text)
    return (match.group(1), match.group(2)) if match else None


def find_network(text: str) -> str | None:
    match = NETWORK_RE.search(text)
    return match.group(1) if match else None


def find_platform(text: str) -> str | None:
    match = PLATFORM_RE.search(text)
    return match.group(1) if match else None


def first_reasonable_dollar_amount(text: str) -> float | None:
    """Card balance: the first $ amount that could be a single position."""
    for match in DOLLAR_RE.finditer(text):
        value = parse_currency(match.group(1))
        if value is not None and 0 < value < MAX_POSITION_BALANCE:
            return value
    return None


def first_reasonable_percentage(text: str) -> float | None:
    """Card APY: the first percentage that is neither a daily rate nor noise."""
    for match in PERCENT_RE.finditer(text):
        value = parse_percent(match.group(1))
        if value is not None and MIN_APY < value < MAX_APY:
            return value
    return None


def daily_rate(text: str) -> str | None:
    """Daily yield rate as displayed, e.g. ``0.027%``."""
    match = DAILY_RATE_RE.search(text)
    return match.group(0) if match else None


def heading_pair(text: str) -> tuple[str, str] | None:
    text = text.strip()
    if len(text) >= MAX_HEADING_CHARS:
        return None
    match = HEADING_PAIR_RE.match(text)
    return (match.group(1), match.group(2)) if match else None
