"""Per-day and per-month aggregates and the cumulative equity curve."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Sequence

from tradezen.core.enums import TradeStatus
from tradezen.core.models import Trade
from tradezen.currency.convert import convert


@dataclass(frozen=True)
class DailyStats:
    """One calendar day (UTC, by exit time)."""

    date: str  # YYYY-MM-DD
    pnl: float
    trades: int
    win_rate: float  # 0-100

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyStats:
    """One calendar month (UTC, by exit time)."""

    month: str  # YYYY-MM
    pnl: float
    trades: int
    win_rate: float  # 0-100

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EquityPoint:
    date: str
    pnl: float
    cumulative: float


def _by_exit_period(
    trades: Sequence[Trade],
    period_of: Callable[[datetime], str],
    base_currency: str,
    rates: Mapping[str, float] | None,
) -> list[tuple[str, float, int, int]]:
    """(period, converted pnl, trades, wins) for closed trades, ascending."""
    buckets: dict[str, list[float]] = defaultdict(lambda: [0.0, 0, 0])
    for trade in trades:
        if trade.status != TradeStatus.CLOSED or trade.exit_time is None:
            continue
        bucket = buckets[period_of(trade.exit_time)]
        bucket[0] += convert(trade.pnl or 0.0, trade.currency or "USD", base_currency, rates)
        bucket[1] += 1
        if (trade.pnl or 0) > 0:
            bucket[2] += 1
    return [
        (period, pnl, int(count), int(wins))
        for period, (pnl, count, wins) in sorted(buckets.items())
    ]


def daily_stats(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[DailyStats]:
    """Group closed trades by exit date, ascending."""
    return [
        DailyStats(date=day, pnl=pnl, trades=count, win_rate=wins / count * 100)
        for day, pnl, count, wins in _by_exit_period(
            trades, lambda when: when.date().isoformat(), base_currency, rates
        )
    ]


def monthly_stats(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> list[MonthlyStats]:
    """Group closed trades by exit month, ascending.

    Only months with trades appear.
    """
    return [
        MonthlyStats(month=month, pnl=pnl, trades=count, win_rate=wins / count * 100)
        for month, pnl, count, wins in _by_exit_period(
            trades, lambda when: when.strftime("%Y-%m"), base_currency, rates
        )
    ]


def equity_curve(days: Sequence[DailyStats]) -> list[EquityPoint]:
    """Running total of daily P&L."""
    points: list[EquityPoint] = []
    cumulative = 0.0
    for day in days:
        cumulative += day.pnl
        points.append(EquityPoint(date=day.date, pnl=day.pnl, cumulative=cumulative))
    return points
