"""Broker export parsers.

Turn raw export text into structured events (balance history, order
logs) or, for MT5 reports, directly into trades.
"""

from .balance import BalanceEvent, parse_balance_history, parse_balance_line
from .detect import detect_csv_format
from .mt5 import parse_mt5_report
from .orders import OrderEvent, parse_order_line, parse_order_log

__all__ = [
    "BalanceEvent",
    "OrderEvent",
    "detect_csv_format",
    "parse_balance_history",
    "parse_balance_line",
    "parse_mt5_report",
    "parse_order_line",
    "parse_order_log",
]
