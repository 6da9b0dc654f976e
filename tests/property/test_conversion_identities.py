"""Property test: conversion identities.

Converting to the same code is exact for every code, known or not, and
converting there and back returns the original amount.
"""

import pytest
from hypothesis import given, settings, strategies as st

from tradezen.currency.convert import convert
from tradezen.currency.rates import RateTable

TABLE = RateTable.fallback()

amounts = st.floats(min_value=-1e9, max_value=1e9, allow_nan=False, allow_infinity=False)
known_codes = st.sampled_from(sorted(TABLE))
any_codes = st.one_of(
    known_codes,
    st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=3, max_size=4),
)


@given(amount=amounts, code=any_codes)
@settings(max_examples=200)
def test_same_currency_is_identity(amount, code):
    assert convert(amount, code, code, TABLE) == amount


@given(amount=amounts, src=known_codes, dst=known_codes)
@settings(max_examples=200)
def test_round_trip(amount, src, dst):
    there = convert(amount, src, dst, TABLE)
    back = convert(there, dst, src, TABLE)
    assert back == pytest.approx(amount, rel=1e-9, abs=1e-9)


@given(
    rates=st.dictionaries(
        st.sampled_from(["EUR", "GBP", "JPY", "BTC", "CHF"]),
        st.floats(min_value=1e-4, max_value=1e5),
        min_size=1,
    ),
    amount=amounts,
)
@settings(max_examples=100)
def test_round_trip_any_table(rates, amount):
    table = RateTable(rates)
    for code in table:
        back = convert(convert(amount, "USD", code, table), code, "USD", table)
        assert back == pytest.approx(amount, rel=1e-9, abs=1e-9)
