"""Import session: the workflow behind an upload.

A user uploads the balance history and, optionally, the order log, in
either order.  After every upload the session re-runs reconciliation
with whatever it has so the preview is always current.  MT5 reports are
self-contained and bypass reconciliation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tradezen.core.enums import CsvFormat
from tradezen.core.errors import UnknownFormatError
from tradezen.core.models import Trade
from tradezen.ingest.balance import BalanceEvent, parse_balance_history
from tradezen.ingest.detect import detect_csv_format
from tradezen.ingest.mt5 import parse_mt5_report
from tradezen.ingest.orders import OrderEvent, parse_order_log
from tradezen.observability.logger import new_import_id

from .reconciler import TradeReconciler

logger = logging.getLogger(__name__)

NO_BALANCE_TRADES = "No trades found in balance history"
NO_ORDER_ENTRIES = "No entries found in order log"
NO_REPORT_TRADES = "No trades found in MT5 report"


@dataclass(frozen=True)
class ImportPreview:
    """Summary shown before the user confirms an import."""

    total: int
    winning: int
    losing: int
    total_pnl: float
    with_risk_levels: int
    without_risk_levels: int
    estimated_entries: int


@dataclass
class ImportResult:
    """Outcome of one upload."""

    trades: list[Trade] = field(default_factory=list)
    message: str = ""
    ok: bool = True

    def preview(self) -> ImportPreview:
        with_risk = sum(1 for t in self.trades if t.has_risk_levels)
        return ImportPreview(
            total=len(self.trades),
            winning=sum(1 for t in self.trades if (t.pnl or 0) > 0),
            losing=sum(1 for t in self.trades if (t.pnl or 0) < 0),
            total_pnl=sum(t.pnl or 0 for t in self.trades),
            with_risk_levels=with_risk,
            without_risk_levels=len(self.trades) - with_risk,
            estimated_entries=sum(1 for t in self.trades if t.entry_time_estimated),
        )


class ImportSession:
    """Holds the uploads of one import and the trades they reconcile to."""

    def __init__(self, reconciler: TradeReconciler | None = None) -> None:
        self._reconciler = reconciler or TradeReconciler()
        self._balance: list[BalanceEvent] = []
        self._orders: list[OrderEvent] = []
        self._trades: list[Trade] = []

    @property
    def trades(self) -> list[Trade]:
        return list(self._trades)

    @property
    def has_balance_history(self) -> bool:
        return bool(self._balance)

    @property
    def has_order_log(self) -> bool:
        return bool(self._orders)

    # ------------------------------------------------------------------ #
    # Uploads                                                              #
    # ------------------------------------------------------------------ #

    def load_csv(self, content: str) -> ImportResult:
        """Load either CSV dialect, detected from its header.

        Raises:
            UnknownFormatError: the header matches neither dialect.
        """
        fmt = detect_csv_format(content)
        if fmt == CsvFormat.BALANCE_HISTORY:
            return self.load_balance_history(content)
        if fmt == CsvFormat.ORDER_LOGS:
            return self.load_order_log(content)
        raise UnknownFormatError(
            "Unrecognised export: expected a balance history or an order log"
        )

    def load_balance_history(self, content: str) -> ImportResult:
        new_import_id()
        events = parse_balance_history(content)
        if not events:
            return ImportResult(message=NO_BALANCE_TRADES, ok=False)
        self._balance = events
        return self._rebuild()

    def load_order_log(self, content: str) -> ImportResult:
        new_import_id()
        events = parse_order_log(content)
        if not events:
            return ImportResult(message=NO_ORDER_ENTRIES, ok=False)
        self._orders = events
        if not self._balance:
            return ImportResult(
                message=(
                    f"Order log loaded ({len(events)} entries); "
                    "waiting for balance history"
                ),
            )
        return self._rebuild()

    def clear_order_log(self) -> ImportResult:
        """Drop the order log and rebuild from balance history alone."""
        self._orders = []
        if not self._balance:
            self._trades = []
            return ImportResult(message="Order log cleared")
        return self._rebuild()

    def load_mt5(self, html: str, currency: str = "USD") -> ImportResult:
        """Import an MT5 report directly.

        Raises:
            ReportStructureError: the report has no Positions table.
        """
        new_import_id()
        trades = parse_mt5_report(html, currency=currency)
        if not trades:
            return ImportResult(message=NO_REPORT_TRADES, ok=False)
        self._trades = trades
        logger.info("Imported %d trades from MT5 report", len(trades))
        return ImportResult(
            trades=list(trades),
            message=f"{len(trades)} trades read from MT5 report",
        )

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _rebuild(self) -> ImportResult:
        if self._orders:
            trades = self._reconciler.reconcile(self._balance, self._orders)
        else:
            trades = self._reconciler.from_balance_history(self._balance)
        self._trades = trades
        if not trades:
            return ImportResult(message=NO_BALANCE_TRADES, ok=False)
        with_risk = sum(1 for t in trades if t.has_risk_levels)
        return ImportResult(
            trades=list(trades),
            message=f"{len(trades)} trades with {with_risk} SL/TP",
        )
