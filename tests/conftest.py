"""Shared fixtures for the tradezen test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tradezen.core.clock import FixedClock
from tradezen.core.enums import Direction, TradeStatus
from tradezen.core.models import Trade
from tradezen.currency.rates import RateTable

BALANCE_HEADER = (
    "Heure,Balance avant,Balance après,"
    "Pertes et profits réalisés (valeur),"
    "Pertes et profits réalisés (devise),Action"
)
ORDER_HEADER = "Heure,Texte"

EURUSD_CLOSE = (
    '2026-02-11 13:31:49,133009.73,137127.38,4117.65,USD,'
    '"Close short position for symbol OANDA:EURUSD at price 1.19018 '
    'for 2941176 units. Position AVG Price was 1.191580, currency: USD, '
    'rate: 1.000000, point value: 1.000000"'
)
EURUSD_ENTRY = (
    "2026-02-11 11:02:10,Call to place market order to sell 2941176 units "
    "of symbol OANDA:EURUSD with SL 1.19278 and TP 1.18972"
)

T0 = datetime(2026, 2, 2, 9, 0, tzinfo=timezone.utc)  # a Monday


def balance_csv(*lines: str) -> str:
    return "\n".join((BALANCE_HEADER, *lines))


def order_csv(*lines: str) -> str:
    return "\n".join((ORDER_HEADER, *lines))


def make_trade(
    pnl: float | None = 100.0,
    *,
    status: TradeStatus = TradeStatus.CLOSED,
    entry_time: datetime | None = None,
    hold: timedelta = timedelta(hours=1),
    **overrides,
) -> Trade:
    """A trade with sensible defaults; closed unless told otherwise."""
    entry = entry_time or T0
    data = dict(
        symbol="EURUSD",
        direction=Direction.LONG,
        entry_price=1.1,
        units=1000,
        entry_time=entry,
        status=status,
        currency="USD",
    )
    if status == TradeStatus.CLOSED:
        data.update(exit_price=1.2, exit_time=entry + hold, pnl=pnl)
    data.update(overrides)
    return Trade(**data)


@pytest.fixture(scope="session")
def trade_factory():
    return make_trade


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def rates() -> RateTable:
    return RateTable({"EUR": 0.5, "GBP": 0.8, "JPY": 150.0})


@pytest.fixture(scope="session")
def make_balance_csv():
    return balance_csv


@pytest.fixture(scope="session")
def make_order_csv():
    return order_csv


@pytest.fixture(scope="session")
def eurusd_close() -> str:
    return EURUSD_CLOSE


@pytest.fixture(scope="session")
def eurusd_entry() -> str:
    return EURUSD_ENTRY
