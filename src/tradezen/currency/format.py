"""Display formatting for monetary amounts."""

from __future__ import annotations

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CHF": "CHF ",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "USDC": "USDC ",
    "USDT": "USDT ",
    "BTC": "₿",
    "ETH": "Ξ",
}

_SUFFIX_CODES = ("CHF", "USDC", "USDT")
_CRYPTO_CODES = ("BTC", "ETH")


def currency_symbol(currency: str = "USD") -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def _group(value: float, min_decimals: int, max_decimals: int) -> str:
    text = f"{value:,.{max_decimals}f}"
    if max_decimals > min_decimals and "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0").ljust(min_decimals, "0")
        text = f"{whole}.{frac}" if frac else whole
    return text


def format_currency(value: float, currency: str = "USD") -> str:
    """``-1234.5, "USD"`` -> ``"-$1,234.50"``; ``12.5, "CHF"`` -> ``"12.50 CHF"``."""
    code = currency.upper()
    magnitude = abs(value)

    if code == "JPY":
        formatted = _group(magnitude, 0, 0)
    elif code in _CRYPTO_CODES:
        formatted = _group(magnitude, 2, 6)
    else:
        formatted = _group(magnitude, 2, 2)

    sign = "-" if value < 0 else ""
    if code in _SUFFIX_CODES:
        return f"{sign}{formatted} {code}"
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    return f"{sign}{symbol}{formatted}"
