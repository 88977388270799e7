"""Pure parsing functions for Aerodrome deposit cards. No I/O."""
from __future__ import annotations

import re

from ...normalize import ordered_range, parse_currency, parse_number, parse_percent

# Base chain token addresses (lowercase) to symbols.
DEFAULT_TOKEN_MAP: dict[str, str] = {
    "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913": "USDC",
    "0xcbb7c0000ab88b473b1f5afd9ef808440eed33bf": "cbBTC",
    "0x4200000000000000000000000000000000000006": "WETH",
    "0x940181a94a35a4569e4529a3cdfb74e38fd98631": "AERO",
    "0x50c5725949a6f0c72e6c4a641f24049a917db0cb": "DAI",
    "0x2ae3f1ec7f1f5012cfeab0185bfc7aa3cf0dec22": "cbETH",
    "0x60a3e35cc302bfa44cb288bc5a4f316fdb1adb42": "EURC",
    "0x04d5ddf5f3a8939889f11e97f8c4bb48317f1938": "USDz",
    "0x236aa50979d5f3de3bd1eeb40e81137f22ab794b": "tBTC",
    "0xd9aaec86b65d86f6a7b5b1b0c42ffa531710b6ca": "USDbC",
}

DEPOSIT_LINK = "/deposit?token0="
ALM_LINK = "&alm="
ALM_MARKERS = ("ALM", "Automated")
CONTAINER_MARKERS = ("Deposited", "~$")

TOKEN0_RE = re.compile(r"token0=(0x[a-fA-F0-9]+)")
TOKEN1_RE = re.compile(r"token1=(0x[a-fA-F0-9]+)")
DEPOSITED_RE = re.compile(r"Deposited[\s\S]*?~\$([0-9,]+\.?[0-9]*)", re.I)
RANGE_RE = re.compile(r"Range[^\d]*([0-9]+\.?[0-9]+)[^\d]+([0-9]+\.?[0-9]+)", re.I)
CURRENT_RE = re.compile(r"Current[^\d]*([0-9]+\.?[0-9]+)", re.I)
APR_RE = re.compile(r"APR[^\d]*([0-9]+\.?[0-9]*)%", re.I)
TRADING_FEES_RE = re.compile(r"Trading Fees[\s\S]*?([0-9]+\.?[0-9]*)\s+USDC", re.I)
EMISSIONS_RE = re.compile(r"Emissions[\s\S]*?([0-9]+\.?[0-9]*)\s+AERO", re.I)


def token_addresses(href: str) -> tuple[str, str] | None:
    """Lowercased (token0, token1) addresses from a deposit link."""
    token0 = TOKEN0_RE.search(href)
    token1 = TOKEN1_RE.search(href)
    if not token0 or not token1:
        return None
    return token0.group(1).lower(), token1.group(1).lower()


def resolve_token(address: str, token_map: dict[str, str]) -> str:
    """Symbol for an address, or a short placeholder for unknown tokens.

    Example:
        "0xdeadbeef..." → "Token0xdead"
    """
    return token_map.get(address) or f"Token{address[:6]}"


def parse_deposited(text: str) -> float | None:
    match = DEPOSITED_RE.search(text)
    return parse_currency(match.group(1)) if match else None


def is_automated(text: str, hrefs: tuple[str, ...] = ()) -> bool:
    return any(m in text for m in ALM_MARKERS) or any(ALM_LINK in h for h in hrefs)


def parse_range(text: str) -> tuple[float | None, float | None]:
    match = RANGE_RE.search(text)
    if not match:
        return None, None
    return ordered_range(parse_number(match.group(1)), parse_number(match.group(2)))


def parse_current_price(text: str) -> float | None:
    match = CURRENT_RE.search(text)
    return parse_number(match.group(1)) if match else None


def highest_apr(text: str) -> float | None:
    """Largest APR shown on the card (cards list one APR per reward stream)."""
    values = [parse_percent(m.group(1)) for m in APR_RE.finditer(text)]
    best = max((v for v in values if v is not None), default=0.0)
    return best if best > 0 else None


def pending_rewards_usd(text: str, emission_price: float = 1.0) -> float | None:
    """Unclaimed trading fees (USDC) plus emissions (AERO) valued in USD."""
    total = 0.0
    for match in TRADING_FEES_RE.finditer(text):
        amount = parse_number(match.group(1))
        if amount and amount > 0:
            total += amount
    for match in EMISSIONS_RE.finditer(text):
        amount = parse_number(match.group(1))
        if amount and amount > 0:
            total += amount * emission_price
    return total if total > 0 else None
