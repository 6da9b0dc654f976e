"""Performance breakdowns by direction, symbol, weekday and hour.

All buckets use closed trades with a P&L, converted to the base
currency.  Wins are counted on the trade's own P&L sign.  Weekday and
hour come from the entry time in UTC.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Sequence

from tradezen.core.enums import Direction
from tradezen.core.models import Trade
from tradezen.currency.convert import convert

from .stats import closed_trades

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


@dataclass
class BucketStats:
    key: str
    trades: int = 0
    wins: int = 0
    pnl: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.trades * 100 if self.trades else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "trades": self.trades,
            "wins": self.wins,
            "pnl": self.pnl,
            "win_rate": self.win_rate,
        }


def _bucket(
    trades: Sequence[Trade],
    key_of: Callable[[Trade], Hashable],
    base_currency: str,
    rates: Mapping[str, float] | None,
) -> dict[Hashable, BucketStats]:
    buckets: dict[Hashable, BucketStats] = {}
    for trade in closed_trades(trades):
        key = key_of(trade)
        bucket = buckets.setdefault(key, BucketStats(key=str(key)))
        bucket.trades += 1
        if (trade.pnl or 0) > 0:
            bucket.wins += 1
        bucket.pnl += convert(trade.pnl or 0.0, trade.currency or "USD", base_currency, rates)
    return buckets


def by_direction(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[BucketStats]:
    """Long and short rows, always both."""
    buckets = _bucket(trades, lambda t: t.direction.value, base_currency, rates)
    return [
        buckets.get(d.value) or BucketStats(key=d.value)
        for d in (Direction.LONG, Direction.SHORT)
    ]


def by_symbol(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[BucketStats]:
    """One row per symbol, best P&L first."""
    buckets = _bucket(trades, lambda t: t.symbol, base_currency, rates)
    return sorted(buckets.values(), key=lambda b: b.pnl, reverse=True)


def by_weekday(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[BucketStats]:
    """Monday to Friday, always five rows."""
    buckets = _bucket(trades, lambda t: t.entry_time.weekday(), base_currency, rates)
    rows = []
    for day, name in enumerate(WEEKDAY_NAMES):
        bucket = buckets.get(day)
        if bucket is None:
            rows.append(BucketStats(key=name))
        else:
            rows.append(BucketStats(key=name, trades=bucket.trades, wins=bucket.wins, pnl=bucket.pnl))
    return rows


def by_hour(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[BucketStats]:
    """Hours of entry that have trades, ascending (keys like ``"9:00"``)."""
    buckets = _bucket(trades, lambda t: t.entry_time.hour, base_currency, rates)
    return [
        BucketStats(key=f"{hour}:00", trades=b.trades, wins=b.wins, pnl=b.pnl)
        for hour, b in sorted(buckets.items())
    ]
