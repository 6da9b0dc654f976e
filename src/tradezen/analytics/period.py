"""Time-range selection for statistics.

Ranges are anchored at "now" and compared against entry times, so a
trade opened inside the window counts even if it closed later.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from tradezen.core.clock import as_utc
from tradezen.core.enums import TimeRange
from tradezen.core.models import Trade

_RANGE_DAYS = {
    TimeRange.LAST_7_DAYS: 7,
    TimeRange.LAST_30_DAYS: 30,
    TimeRange.LAST_90_DAYS: 90,
}


def range_start(time_range: TimeRange | str, now: datetime) -> datetime | None:
    """First instant of ``time_range`` relative to ``now``; ``None`` for all."""
    time_range = TimeRange(time_range)
    if time_range == TimeRange.ALL:
        return None
    now = as_utc(now)
    if time_range == TimeRange.YEAR_TO_DATE:
        return datetime(now.year, 1, 1, tzinfo=timezone.utc)
    return now - timedelta(days=_RANGE_DAYS[time_range])


def filter_by_range(trades: Sequence[Trade], since: datetime | None) -> list[Trade]:
    """Trades entered strictly after ``since`` (all of them when ``None``)."""
    if since is None:
        return list(trades)
    since = as_utc(since)
    return [t for t in trades if t.entry_time > since]
