"""Full analytics report for a trade set, as the dashboard renders it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Sequence

from tradezen.core.models import Trade

from .breakdown import BucketStats, by_direction, by_hour, by_symbol, by_weekday
from .daily import (
    DailyStats,
    EquityPoint,
    MonthlyStats,
    daily_stats,
    equity_curve,
    monthly_stats,
)
from .period import filter_by_range
from .stats import TradeStats, compute_stats


@dataclass(frozen=True)
class AnalyticsReport:
    stats: TradeStats
    since: datetime | None = None
    daily: list[DailyStats] = field(default_factory=list)
    equity: list[EquityPoint] = field(default_factory=list)
    monthly: list[MonthlyStats] = field(default_factory=list)
    directions: list[BucketStats] = field(default_factory=list)
    symbols: list[BucketStats] = field(default_factory=list)
    weekdays: list[BucketStats] = field(default_factory=list)
    hours: list[BucketStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "since": self.since.isoformat() if self.since else None,
            "stats": self.stats.to_dict(),
            "daily": [d.to_dict() for d in self.daily],
            "equity": [asdict(p) for p in self.equity],
            "monthly": [m.to_dict() for m in self.monthly],
            "directions": [b.to_dict() for b in self.directions],
            "symbols": [b.to_dict() for b in self.symbols],
            "weekdays": [b.to_dict() for b in self.weekdays],
            "hours": [b.to_dict() for b in self.hours],
        }


def build_report(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
    since: datetime | None = None,
) -> AnalyticsReport:
    """Compute every analytics view over one snapshot of trades and rates.

    With ``since`` only trades entered after it are considered.
    """
    snapshot = filter_by_range(trades, since)
    days = daily_stats(snapshot, base_currency, rates)
    return AnalyticsReport(
        stats=compute_stats(snapshot, base_currency, rates),
        since=since,
        daily=days,
        equity=equity_curve(days),
        monthly=monthly_stats(snapshot, base_currency, rates),
        directions=by_direction(snapshot, base_currency, rates),
        symbols=by_symbol(snapshot, base_currency, rates),
        weekdays=by_weekday(snapshot, base_currency, rates),
        hours=by_hour(snapshot, base_currency, rates),
    )
