"""Enumerations used across the journal engine."""

from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class OrderAction(str, Enum):
    """Kind of instruction recovered from an order-log line."""

    BUY = "buy"
    SELL = "sell"
    EXECUTE = "execute"
    MODIFY = "modify"
    LIMIT = "limit"
    CANCEL = "cancel"


class CsvFormat(str, Enum):
    BALANCE_HISTORY = "balance_history"
    ORDER_LOGS = "order_logs"
    UNKNOWN = "unknown"


class TimeRange(str, Enum):
    """Entry-time window the statistics are restricted to."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    YEAR_TO_DATE = "ytd"
    ALL = "all"
