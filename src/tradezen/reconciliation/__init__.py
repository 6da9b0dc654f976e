"""Reconciliation layer: rebuilds complete trades from broker exports.

TradeReconciler   Pairs balance-history closes with order-log entries
PositionBook      Per-symbol pool of open-position candidates
ImportSession     Upload workflow: detect, parse, reconcile, preview
"""

from .positions import PositionBook, PositionState, RiskLevels
from .reconciler import TradeReconciler, pnl_percent
from .session import ImportPreview, ImportResult, ImportSession
from .tags import asset_class_tags, trade_tags

__all__ = [
    "ImportPreview",
    "ImportResult",
    "ImportSession",
    "PositionBook",
    "PositionState",
    "RiskLevels",
    "TradeReconciler",
    "asset_class_tags",
    "pnl_percent",
    "trade_tags",
]
