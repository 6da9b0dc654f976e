"""Currency normalisation: rate snapshots, conversion, display."""

from .convert import conversion_rate, convert
from .format import CURRENCY_SYMBOLS, currency_symbol, format_currency
from .rates import FALLBACK_RATES, FIXED_RATES, RateProvider, RateTable

__all__ = [
    "CURRENCY_SYMBOLS",
    "FALLBACK_RATES",
    "FIXED_RATES",
    "RateProvider",
    "RateTable",
    "conversion_rate",
    "convert",
    "currency_symbol",
    "format_currency",
]
