"""Trade store interface.

The journal's trades live in an external store.  Every operation may
fail; implementations log the failure and return the neutral value
(``None``, ``False`` or ``[]``) instead of raising, so callers can fall
back without a try/except around each call.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from tradezen.core.models import Trade, TradeUpdate


@runtime_checkable
class TradeStore(Protocol):
    def create(self, trade: Trade) -> Trade | None:
        """Persist a new trade; the stored copy, or ``None`` on failure."""
        ...

    def update(self, trade_id: str, update: TradeUpdate) -> Trade | None:
        """Apply a partial update; the updated trade, or ``None``."""
        ...

    def delete(self, trade_id: str) -> bool:
        ...

    def delete_all(self) -> bool:
        """Journal reset."""
        ...

    def bulk_create(self, trades: Sequence[Trade]) -> list[Trade]:
        """Persist many trades at once; ``[]`` on failure."""
        ...

    def fetch_all(self) -> list[Trade]:
        """All trades, newest entry first; ``[]`` on failure."""
        ...
