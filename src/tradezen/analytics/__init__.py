"""Statistics engine: journal analytics over a trade set.

TradeStats        Win/loss aggregates, risk-adjusted ratios, drawdown, SQN
DailyStats        One row per exit date (calendar / heatmap)
MonthlyStats      One row per exit month (calendar summary)
EquityPoint       Cumulative P&L by day
BucketStats       Direction / symbol / weekday / hour breakdown rows
AnalyticsReport   Everything above for one snapshot, optionally time-ranged
"""

from .breakdown import BucketStats, by_direction, by_hour, by_symbol, by_weekday
from .daily import (
    DailyStats,
    EquityPoint,
    MonthlyStats,
    daily_stats,
    equity_curve,
    monthly_stats,
)
from .period import filter_by_range, range_start
from .report import AnalyticsReport, build_report
from .stats import TradeStats, closed_trades, compute_stats

__all__ = [
    "AnalyticsReport",
    "BucketStats",
    "DailyStats",
    "EquityPoint",
    "MonthlyStats",
    "TradeStats",
    "build_report",
    "by_direction",
    "by_hour",
    "by_symbol",
    "by_weekday",
    "closed_trades",
    "compute_stats",
    "daily_stats",
    "equity_curve",
    "filter_by_range",
    "monthly_stats",
    "range_start",
]
