"""In-memory trade store for tests and dry runs."""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import ValidationError

from tradezen.core.errors import InvalidTransitionError
from tradezen.core.models import Trade, TradeUpdate

logger = logging.getLogger(__name__)


class MemoryTradeStore:
    """Dict-backed ``TradeStore``.  Returns copies, never live objects."""

    def __init__(self, trades: Sequence[Trade] = ()) -> None:
        self._trades: dict[str, Trade] = {t.id: t.model_copy(deep=True) for t in trades}

    def create(self, trade: Trade) -> Trade | None:
        if trade.id in self._trades:
            logger.error("Trade %s already exists", trade.id)
            return None
        self._trades[trade.id] = trade.model_copy(deep=True)
        return trade.model_copy(deep=True)

    def update(self, trade_id: str, update: TradeUpdate) -> Trade | None:
        current = self._trades.get(trade_id)
        if current is None:
            logger.error("Cannot update unknown trade %s", trade_id)
            return None
        try:
            updated = current.apply_update(update)
        except (InvalidTransitionError, ValidationError) as exc:
            logger.error("Rejected update for trade %s: %s", trade_id, exc)
            return None
        self._trades[trade_id] = updated
        return updated.model_copy(deep=True)

    def delete(self, trade_id: str) -> bool:
        if self._trades.pop(trade_id, None) is None:
            logger.error("Cannot delete unknown trade %s", trade_id)
            return False
        return True

    def delete_all(self) -> bool:
        self._trades.clear()
        return True

    def bulk_create(self, trades: Sequence[Trade]) -> list[Trade]:
        duplicates = [t.id for t in trades if t.id in self._trades]
        if duplicates:
            logger.error("Bulk create rejected, %d trades already exist", len(duplicates))
            return []
        for trade in trades:
            self._trades[trade.id] = trade.model_copy(deep=True)
        return [t.model_copy(deep=True) for t in trades]

    def fetch_all(self) -> list[Trade]:
        return sorted(
            (t.model_copy(deep=True) for t in self._trades.values()),
            key=lambda t: t.entry_time,
            reverse=True,
        )

    def __len__(self) -> int:
        return len(self._trades)
