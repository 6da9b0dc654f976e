"""Trade persistence: the store interface and its implementations."""

from .base import TradeStore
from .memory import MemoryTradeStore
from .sql import SqlTradeStore

__all__ = ["MemoryTradeStore", "SqlTradeStore", "TradeStore"]
