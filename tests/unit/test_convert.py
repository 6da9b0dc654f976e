"""Test currency conversion."""

import pytest

from tradezen.currency.convert import conversion_rate, convert
from tradezen.currency.rates import FALLBACK_RATES


class TestConvert:
    def test_same_currency_is_identity(self, rates):
        assert convert(123.45, "EUR", "EUR", rates) == 123.45

    def test_same_currency_is_case_insensitive(self, rates):
        assert convert(10.0, "eur", "EUR", rates) == 10.0

    def test_unknown_same_code_is_identity(self, rates):
        assert convert(7.5, "XYZ", "XYZ", rates) == 7.5

    def test_zero_amount(self, rates):
        assert convert(0.0, "EUR", "JPY", rates) == 0.0

    def test_via_usd(self, rates):
        # 100 EUR -> 200 USD -> 160 GBP
        assert convert(100.0, "EUR", "GBP", rates) == pytest.approx(160.0)

    def test_to_usd(self, rates):
        assert convert(100.0, "EUR", "USD", rates) == pytest.approx(200.0)

    def test_unknown_code_counts_as_usd(self, rates):
        assert convert(100.0, "XYZ", "EUR", rates) == pytest.approx(50.0)
        assert convert(100.0, "EUR", "XYZ", rates) == pytest.approx(200.0)

    def test_fixed_units_are_forced(self, rates):
        assert rates["USC"] == 0.01
        assert convert(100.0, "USDT", "USD", rates) == pytest.approx(100.0)

    def test_defaults_to_fallback_rates(self):
        expected = 100.0 / FALLBACK_RATES["EUR"]
        assert convert(100.0, "EUR", "USD") == pytest.approx(expected)


class TestConversionRate:
    def test_identity(self, rates):
        assert conversion_rate("GBP", "GBP", rates) == 1.0

    def test_ratio(self, rates):
        assert conversion_rate("EUR", "JPY", rates) == pytest.approx(300.0)
