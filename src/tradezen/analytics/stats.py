"""Performance statistics over a trade set.

Only closed trades with a P&L participate; ``total_trades`` still counts
everything it was given.  Every P&L amount is converted into the
requested base currency first.  Prices are never converted.

Example::

    stats = compute_stats(trades, base_currency="EUR", rates=provider.snapshot())
    print(stats.win_rate, stats.profit_factor, stats.max_drawdown)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from tradezen.core.enums import TradeStatus
from tradezen.core.models import Trade
from tradezen.currency.convert import convert


@dataclass(frozen=True)
class TradeStats:
    """Aggregate journal statistics.  Percentages are 0-100."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_pnl: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    profit_factor: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    average_rrr: float = 0.0
    consecutive_wins: int = 0
    consecutive_losses: int = 0
    expectancy: float = 0.0
    average_holding_time: float = 0.0  # hours
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    max_drawdown: float = 0.0
    max_drawdown_percent: float = 0.0
    sqn: float = 0.0
    base_currency: str = "USD"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def closed_trades(trades: Sequence[Trade]) -> list[Trade]:
    """Trades that count towards statistics."""
    return [t for t in trades if t.status == TradeStatus.CLOSED and t.pnl is not None]


def compute_stats(
    trades: Sequence[Trade],
    base_currency: str = "USD",
    rates: Mapping[str, float] | None = None,
) -> TradeStats:
    """Compute ``TradeStats`` for ``trades`` in ``base_currency``."""
    base = base_currency.upper()
    closed = closed_trades(trades)
    if not closed:
        return TradeStats(total_trades=len(trades), base_currency=base)

    def pnl_of(t: Trade) -> float:
        return convert(t.pnl or 0.0, t.currency or "USD", base, rates)

    n = len(closed)
    winners = [t for t in closed if (t.pnl or 0) > 0]
    losers = [t for t in closed if (t.pnl or 0) < 0]
    win_pnls = [pnl_of(t) for t in winners]
    loss_pnls = [pnl_of(t) for t in losers]

    total_pnl = sum(pnl_of(t) for t in closed)
    total_wins = sum(win_pnls)
    total_losses = abs(sum(loss_pnls))

    win_fraction = len(winners) / n
    average_win = total_wins / len(winners) if winners else 0.0
    average_loss = total_losses / len(losers) if losers else 0.0
    expectancy = win_fraction * average_win - (1 - win_fraction) * average_loss

    if total_losses > 0:
        profit_factor = total_wins / total_losses
    elif total_wins > 0:
        profit_factor = math.inf
    else:
        profit_factor = 0.0

    # Time-ordered series
    ordered = sorted(closed, key=lambda t: t.exit_time)
    returns = [pnl_of(t) for t in ordered]

    mean_return = total_pnl / n
    std_dev = math.sqrt(sum((r - mean_return) ** 2 for r in returns) / n)
    downside = [r for r in returns if r < 0]
    downside_dev = math.sqrt(sum(r ** 2 for r in downside) / (len(downside) or 1))

    sharpe = mean_return / std_dev if std_dev != 0 else 0.0
    sortino = mean_return / downside_dev if downside_dev != 0 else 0.0
    sqn = math.sqrt(n) * (mean_return / std_dev) if std_dev != 0 else 0.0

    max_wins, max_losses = _longest_runs(returns)
    max_dd, max_dd_pct = _drawdown(returns)

    return TradeStats(
        total_trades=len(trades),
        winning_trades=len(winners),
        losing_trades=len(losers),
        win_rate=win_fraction * 100,
        total_pnl=total_pnl,
        average_win=average_win,
        average_loss=average_loss,
        profit_factor=profit_factor,
        largest_win=max(win_pnls) if win_pnls else 0.0,
        largest_loss=min(loss_pnls) if loss_pnls else 0.0,
        average_rrr=_average_rrr(closed),
        consecutive_wins=max_wins,
        consecutive_losses=max_losses,
        expectancy=expectancy,
        average_holding_time=_average_holding_hours(closed),
        sharpe_ratio=sharpe,
        sortino_ratio=sortino,
        max_drawdown=max_dd,
        max_drawdown_percent=max_dd_pct,
        sqn=sqn,
        base_currency=base,
    )


# ---------------------------------------------------------------------- #
# Private helpers                                                          #
# ---------------------------------------------------------------------- #

def _longest_runs(returns: Sequence[float]) -> tuple[int, int]:
    """Longest run of wins (> 0) and of non-wins (<= 0)."""
    max_wins = max_losses = 0
    wins = losses = 0
    for r in returns:
        if r > 0:
            wins += 1
            losses = 0
            max_wins = max(max_wins, wins)
        else:
            losses += 1
            wins = 0
            max_losses = max(max_losses, losses)
    return max_wins, max_losses


def _drawdown(returns: Sequence[float]) -> tuple[float, float]:
    """Max drawdown of the cumulative P&L curve starting at 0.

    The percentage is relative to the running peak and only measured
    once the peak is above zero.
    """
    equity = peak = 0.0
    max_dd = max_dd_pct = 0.0
    for r in returns:
        equity += r
        if equity > peak:
            peak = equity
        dd = peak - equity
        if dd > max_dd:
            max_dd = dd
        if peak > 0:
            max_dd_pct = max(max_dd_pct, dd / peak * 100)
    return max_dd, max_dd_pct


def _average_rrr(closed: Sequence[Trade]) -> float:
    """Mean planned reward/risk over trades with entry, SL and TP set."""
    planned = [t for t in closed if t.stop_loss and t.take_profit and t.entry_price]
    if not planned:
        return 0.0
    total = 0.0
    for t in planned:
        risk = abs(t.entry_price - t.stop_loss)
        reward = abs(t.take_profit - t.entry_price)
        total += reward / risk if risk > 0 else 0.0
    return total / len(planned)


def _average_holding_hours(closed: Sequence[Trade]) -> float:
    durations = [
        (t.exit_time - t.entry_time).total_seconds()
        for t in closed
        if t.entry_time is not None and t.exit_time is not None
    ]
    positive = [d for d in durations if d > 0]
    if not positive:
        return 0.0
    return sum(positive) / len(positive) / 3600
