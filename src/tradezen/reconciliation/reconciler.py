"""Trade reconciler: closed positions + order log -> complete trades.

The balance history knows how every position ended (exit price, P&L,
the broker's average entry price) but not when it was opened or which
stop-loss / take-profit protected it.  The order log knows the entries
and every SL/TP change but not the outcome.  The reconciler pairs them:

1. Scan the order log in time order and open a ``PositionState`` for
   each market entry that carried SL and TP.  Its entry price comes from
   the execution confirmation that followed the call.  Position
   modifications update the newest candidate for their symbol.
2. Walk the closed positions in time order and claim, per symbol, the
   first candidate with the same direction, opened before the close and
   priced within tolerance of the broker's average price; failing that,
   one with the same unit count.
3. Without a candidate, fall back to an execution at the average price
   (then SL/TP from orders around it), and finally to an entry time
   estimated a fixed number of hours before the close.

Every closed position yields exactly one trade, newest first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from tradezen.core.config import ReconcileConfig
from tradezen.core.enums import Direction, OrderAction, TradeStatus
from tradezen.core.models import Trade
from tradezen.ingest.balance import BalanceEvent
from tradezen.ingest.orders import OrderEvent

from .positions import PositionBook, PositionState, RiskLevels
from .tags import trade_tags

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """What the order log told us about one closed position's entry."""

    time: datetime
    stop_loss: float | None = None
    take_profit: float | None = None
    estimated: bool = False


def _order_key(event: OrderEvent) -> tuple:
    return (event.time, event.text)


def _balance_key(event: BalanceEvent) -> tuple:
    return (event.time, event.action)


def pnl_percent(pnl: float, entry_price: float, units: float | None) -> float:
    """P&L relative to entry notional, in percent (0 when unpriced)."""
    if entry_price <= 0:
        return 0.0
    return pnl / (entry_price * (units or 1)) * 100


class TradeReconciler:
    """Pairs balance-history closes with order-log entries.

    Parameters
    ----------
    config : ReconcileConfig | None
        Matching windows, tolerances and tag thresholds.  Defaults match
        the broker's export behaviour (5 s execution window, 0.1 % price
        tolerance, 2 h estimated holding time).
    """

    def __init__(self, config: ReconcileConfig | None = None) -> None:
        self._config = config or ReconcileConfig()

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def reconcile(
        self,
        balance_events: Iterable[BalanceEvent],
        order_events: Iterable[OrderEvent],
    ) -> list[Trade]:
        """Build closed trades from both exports."""
        orders = sorted(order_events, key=_order_key)
        book = self._build_positions(orders)

        trades: list[Trade] = []
        matched = recovered = estimated = 0
        for event in sorted(balance_events, key=_balance_key):
            if not event.is_trade:
                continue
            entry = self._match_position(book, event)
            if entry is not None:
                matched += 1
            else:
                entry = self._entry_from_executions(orders, event)
                if entry is not None:
                    recovered += 1
                else:
                    entry = self._estimated_entry(event)
                    estimated += 1
            trades.append(self._to_trade(event, entry))

        logger.info(
            "Reconciled %d trades (%d matched, %d from executions, %d estimated)",
            len(trades), matched, recovered, estimated,
        )
        return self._newest_first(trades)

    def from_balance_history(
        self, balance_events: Iterable[BalanceEvent]
    ) -> list[Trade]:
        """Build trades from the balance history alone.

        Entry times are estimated and no SL/TP is known.
        """
        trades = [
            self._to_trade(event, self._estimated_entry(event))
            for event in sorted(balance_events, key=_balance_key)
            if event.is_trade
        ]
        logger.info("Built %d trades from balance history only", len(trades))
        return self._newest_first(trades)

    # ------------------------------------------------------------------ #
    # Order-log pass                                                       #
    # ------------------------------------------------------------------ #

    def _build_positions(self, orders: Sequence[OrderEvent]) -> PositionBook:
        book = PositionBook()
        for order in orders:
            if order.symbol is None:
                continue

            if order.is_market_entry:
                execution = self._find_execution(orders, order)
                position = PositionState(
                    symbol=order.symbol,
                    entry_time=order.time,
                    entry_price=execution.price if execution and execution.price else 0.0,
                    units=order.units or 0.0,
                    direction=(
                        Direction.LONG if order.action == OrderAction.BUY
                        else Direction.SHORT
                    ),
                )
                position.set_risk(
                    RiskLevels(order.time, order.stop_loss, order.take_profit)
                )
                book.open(position)

            if order.action == OrderAction.MODIFY and order.has_risk_levels:
                position = book.latest(order.symbol)
                if position is not None:
                    position.set_risk(
                        RiskLevels(order.time, order.stop_loss, order.take_profit)
                    )
        return book

    def _find_execution(
        self, orders: Sequence[OrderEvent], call: OrderEvent
    ) -> OrderEvent | None:
        """Execution confirmation for a market call (same symbol and units)."""
        window = self._config.execution_window_seconds
        for o in orders:
            if (
                o.action == OrderAction.EXECUTE
                and o.symbol == call.symbol
                and o.units == call.units
                and abs((o.time - call.time).total_seconds()) < window
            ):
                return o
        return None

    # ------------------------------------------------------------------ #
    # Matching                                                             #
    # ------------------------------------------------------------------ #

    def _match_position(
        self, book: PositionBook, event: BalanceEvent
    ) -> _Entry | None:
        reference = event.entry_price or 0.0
        if reference == 0:
            return None

        by_price: PositionState | None = None
        by_units: PositionState | None = None
        for position in book.candidates(event.full_symbol):
            if position.direction != event.direction:
                continue
            if position.entry_time >= event.time:
                continue
            if abs(position.entry_price - reference) / reference < self._config.price_tolerance:
                by_price = position
                break
            if (
                by_units is None
                and abs(position.units - (event.units or 0)) < self._config.unit_tolerance
            ):
                by_units = position

        position = by_price or by_units
        if position is None:
            return None

        book.claim(position)
        stop_loss, take_profit = position.risk_at(event.time)
        return _Entry(position.entry_time, stop_loss, take_profit)

    def _entry_from_executions(
        self, orders: Sequence[OrderEvent], event: BalanceEvent
    ) -> _Entry | None:
        """Recover an entry from an execution priced at the average price."""
        reference = event.entry_price or 0.0
        if reference <= 0:
            return None
        symbol = event.full_symbol
        tolerance = self._config.price_tolerance

        execution = next(
            (
                o for o in orders
                if o.symbol == symbol
                and o.action == OrderAction.EXECUTE
                and o.price is not None
                and abs(o.price - reference) / reference < tolerance
                and o.time < event.time
            ),
            None,
        )
        if execution is None:
            return None

        entry = _Entry(execution.time)
        window = self._config.risk_scan_window_seconds
        nearby = next(
            (
                o for o in orders
                if o.symbol == symbol
                and abs((o.time - execution.time).total_seconds()) < window
                and o.has_risk_levels
            ),
            None,
        )
        if nearby is not None:
            entry.stop_loss = nearby.stop_loss
            entry.take_profit = nearby.take_profit

        modifications = [
            o for o in orders
            if o.symbol == symbol
            and o.action == OrderAction.MODIFY
            and execution.time < o.time <= event.time
        ]
        if modifications:
            last = modifications[-1]
            entry.stop_loss = last.stop_loss or entry.stop_loss
            entry.take_profit = last.take_profit or entry.take_profit
        return entry

    def _estimated_entry(self, event: BalanceEvent) -> _Entry:
        logger.debug(
            "No entry found for %s closed at %s; estimating",
            event.full_symbol, event.time.isoformat(),
        )
        hold = timedelta(hours=self._config.estimated_hold_hours)
        return _Entry(event.time - hold, estimated=True)

    # ------------------------------------------------------------------ #
    # Output                                                               #
    # ------------------------------------------------------------------ #

    def _to_trade(self, event: BalanceEvent, entry: _Entry) -> Trade:
        cfg = self._config
        return Trade(
            symbol=event.symbol,
            direction=event.direction,
            entry_price=event.entry_price,
            exit_price=event.exit_price,
            units=event.units or 0.0,
            entry_time=entry.time,
            exit_time=event.time,
            stop_loss=entry.stop_loss,
            take_profit=entry.take_profit,
            pnl=event.pnl,
            pnl_percent=pnl_percent(event.pnl, event.entry_price, event.units),
            status=TradeStatus.CLOSED,
            currency=event.currency,
            notes=(
                f"Balance: {event.balance_before:.2f} -> "
                f"{event.balance_after:.2f} {event.currency}"
            ),
            tags=trade_tags(
                event.symbol,
                event.pnl,
                event.exchange,
                big_trade=cfg.big_trade_threshold,
                good_trade=cfg.good_trade_threshold,
            ),
            entry_time_estimated=entry.estimated,
        )

    @staticmethod
    def _newest_first(trades: list[Trade]) -> list[Trade]:
        return sorted(trades, key=lambda t: t.exit_time, reverse=True)
