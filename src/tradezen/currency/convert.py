"""Currency conversion over a rate table.

Unknown codes count as rate 1 (USD-equivalent) so that one unrecognised
currency never blocks a statistics run.
"""

from __future__ import annotations

from collections.abc import Mapping

from .rates import RateTable

_DEFAULT_RATES = RateTable.fallback()


def _rate(code: str, rates: Mapping[str, float]) -> float:
    return rates.get(code.upper()) or 1.0


def convert(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float] | None = None,
) -> float:
    """Convert ``amount`` via USD: ``amount / rate[from] * rate[to]``."""
    if from_currency.upper() == to_currency.upper():
        return amount
    if not amount:
        return 0.0
    table = _DEFAULT_RATES if rates is None else rates
    return amount / _rate(from_currency, table) * _rate(to_currency, table)


def conversion_rate(
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float] | None = None,
) -> float:
    """Units of ``to_currency`` per unit of ``from_currency``."""
    if from_currency.upper() == to_currency.upper():
        return 1.0
    table = _DEFAULT_RATES if rates is None else rates
    return _rate(to_currency, table) / _rate(from_currency, table)
