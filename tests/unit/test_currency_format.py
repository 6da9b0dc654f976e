"""Test currency display formatting."""

import pytest

from tradezen.currency.format import currency_symbol, format_currency


@pytest.mark.parametrize(
    "value, code, expected",
    [
        (1234.5, "USD", "$1,234.50"),
        (-1234.5, "USD", "-$1,234.50"),
        (0, "EUR", "€0.00"),
        (99.999, "GBP", "£100.00"),
        (1234.6, "JPY", "¥1,235"),
        (1.5, "BTC", "₿1.50"),
        (0.123456789, "ETH", "Ξ0.123457"),
        (12.5, "CHF", "12.50 CHF"),
        (-3, "USDT", "-3.00 USDT"),
        (5, "XYZ", "XYZ 5.00"),
        (2500, "cad", "CA$2,500.00"),
    ],
)
def test_format_currency(value, code, expected):
    assert format_currency(value, code) == expected


def test_currency_symbol():
    assert currency_symbol("eur") == "€"
    assert currency_symbol("NZD") == "NZ$"
    assert currency_symbol("XYZ") == "XYZ"
