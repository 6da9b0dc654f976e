"""Core domain models used across the journal engine.

``Trade`` is the durable entity: it is what the reconciler emits, what
the trade store persists, and what the statistics engine reads.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .clock import as_utc
from .enums import Direction, TradeStatus
from .errors import InvalidTransitionError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# open -> closed | cancelled; terminal states have no exits.
_ALLOWED_TRANSITIONS: dict[TradeStatus, frozenset[TradeStatus]] = {
    TradeStatus.OPEN: frozenset({TradeStatus.CLOSED, TradeStatus.CANCELLED}),
    TradeStatus.CLOSED: frozenset(),
    TradeStatus.CANCELLED: frozenset(),
}


class Trade(BaseModel):
    """One discrete trade in the journal."""

    id: str = Field(default_factory=_new_id)
    user_id: str | None = None
    symbol: str
    direction: Direction
    entry_price: float
    exit_price: float | None = None
    units: float
    entry_time: datetime
    exit_time: datetime | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    pnl: float | None = None
    pnl_percent: float | None = None
    status: TradeStatus = TradeStatus.OPEN
    currency: str = "USD"
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    strategy: str | None = None
    screenshots: list[str] = Field(default_factory=list)

    # True when entry_time was estimated rather than recovered from a log
    entry_time_estimated: bool = False

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("entry_time", "exit_time", "created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _closed_is_complete(self) -> "Trade":
        if self.status == TradeStatus.CLOSED:
            missing = [
                name
                for name in ("exit_price", "exit_time", "pnl")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(
                    f"closed trade requires {', '.join(missing)}"
                )
        return self

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @property
    def has_risk_levels(self) -> bool:
        """Both stop-loss and take-profit are set (and non-zero)."""
        return bool(self.stop_loss) and bool(self.take_profit)

    def apply_update(self, update: "TradeUpdate") -> "Trade":
        """Return a copy with ``update`` applied and ``updated_at`` refreshed.

        Raises:
            InvalidTransitionError: the status change leaves a terminal
                state or is otherwise not allowed.
            pydantic.ValidationError: the result violates the closed-trade
                completeness rule.
        """
        changes = update.model_dump(exclude_unset=True)
        new_status = changes.get("status")
        if new_status is not None:
            new_status = TradeStatus(new_status)
            if (
                new_status != self.status
                and new_status not in _ALLOWED_TRANSITIONS[self.status]
            ):
                raise InvalidTransitionError(self.status.value, new_status.value)
        data: dict[str, Any] = self.model_dump()
        data.update(changes)
        data["updated_at"] = _utcnow()
        return Trade.model_validate(data)


class TradeUpdate(BaseModel):
    """Partial update for a stored trade. Only explicitly set fields apply."""

    symbol: str | None = None
    direction: Direction | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    units: float | None = None
    entry_time: datetime | None = None
    exit_time: datetime | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    pnl: float | None = None
    pnl_percent: float | None = None
    status: TradeStatus | None = None
    currency: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    strategy: str | None = None
    screenshots: list[str] | None = None
