"""Automatic tags for imported trades."""

from __future__ import annotations

_METALS = ("XAU", "XAG")
_CRYPTO = ("BTC", "ETH", "SOL", "XRP", "ADA")
_FX_CODES = ("JPY", "USD", "EUR", "GBP", "CAD", "AUD", "CHF", "NZD")


def asset_class_tags(symbol: str) -> list[str]:
    """Metals / Crypto / Forex guesses from the symbol text.

    A metals symbol quoted in a currency (XAUUSD) is never also Forex.
    """
    tags: list[str] = []
    is_metal = any(m in symbol for m in _METALS)
    if is_metal:
        tags.append("Metals")
    if any(c in symbol for c in _CRYPTO):
        tags.append("Crypto")
    if not is_metal and any(c in symbol for c in _FX_CODES):
        tags.append("Forex")
    return tags


def trade_tags(
    symbol: str,
    pnl: float,
    exchange: str | None = None,
    *,
    big_trade: float = 5000.0,
    good_trade: float = 1000.0,
) -> list[str]:
    tags: list[str] = []
    if exchange:
        tags.append(exchange)
    if abs(pnl) > big_trade:
        tags.append("Big Trade")
    if abs(pnl) > good_trade:
        tags.append("Good Trade")
    tags.extend(asset_class_tags(symbol))
    return tags
