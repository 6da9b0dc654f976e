"""SQLAlchemy-backed trade store.

One ``trades`` table; tags and screenshots are JSON columns.  Works on
any SQLAlchemy URL; SQLite is the default.

Usage::

    store = SqlTradeStore("sqlite:///tradezen.db")
    store.bulk_create(result.trades)
    trades = store.fetch_all()
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    String,
    Text,
    create_engine,
    delete,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from tradezen.core.errors import InvalidTransitionError
from tradezen.core.models import Trade, TradeUpdate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# ORM model
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Declarative base for the journal tables."""

    pass


class TradeRow(Base):
    """Persisted journal trade.  Maps 1:1 from :class:`Trade`."""

    __tablename__ = "trades"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    direction: Mapped[str] = mapped_column(String(8), nullable=False)
    entry_price: Mapped[float] = mapped_column(Float, nullable=False)
    exit_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    units: Mapped[float] = mapped_column(Float, nullable=False)
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    stop_loss: Mapped[float | None] = mapped_column(Float, nullable=True)
    take_profit: Mapped[float | None] = mapped_column(Float, nullable=True)
    pnl: Mapped[float | None] = mapped_column(Float, nullable=True)
    pnl_percent: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="open")
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="USD")
    notes: Mapped[str] = mapped_column(Text, default="")
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    strategy: Mapped[str | None] = mapped_column(String(64), nullable=True)
    screenshots: Mapped[list | None] = mapped_column(JSON, nullable=True)
    entry_time_estimated: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

    __table_args__ = (
        Index("ix_trades_symbol", "symbol"),
        Index("ix_trades_status", "status"),
        Index("ix_trades_entry_time", "entry_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<TradeRow(id={self.id!r}, symbol={self.symbol!r}, "
            f"status={self.status!r})>"
        )


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

_COLUMNS = tuple(c.name for c in TradeRow.__table__.columns)


def trade_to_row(trade: Trade) -> TradeRow:
    data = trade.model_dump(mode="python")
    data["direction"] = trade.direction.value
    data["status"] = trade.status.value
    return TradeRow(**{name: data[name] for name in _COLUMNS})


def row_to_trade(row: TradeRow) -> Trade:
    data: dict[str, Any] = {name: getattr(row, name) for name in _COLUMNS}
    data["tags"] = list(row.tags or [])
    data["screenshots"] = list(row.screenshots or [])
    return Trade.model_validate(data)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class SqlTradeStore:
    """``TradeStore`` on a synchronous SQLAlchemy engine.

    Parameters
    ----------
    database_url : str
        SQLAlchemy URL.  Ignored when ``engine`` is given.
    engine : Engine | None
        Pre-built engine (tests pass an in-memory SQLite one).
    create_tables : bool
        Run ``create_all`` on construction.
    """

    def __init__(
        self,
        database_url: str = "sqlite:///tradezen.db",
        *,
        engine: Engine | None = None,
        create_tables: bool = True,
    ) -> None:
        self._engine = engine or create_engine(database_url)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self._engine)

    def create(self, trade: Trade) -> Trade | None:
        try:
            with self._session_factory.begin() as session:
                session.add(trade_to_row(trade))
        except SQLAlchemyError as exc:
            logger.error("Failed to create trade %s: %s", trade.id, exc)
            return None
        return trade

    def update(self, trade_id: str, update: TradeUpdate) -> Trade | None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(TradeRow, trade_id)
                if row is None:
                    logger.error("Cannot update unknown trade %s", trade_id)
                    return None
                try:
                    updated = row_to_trade(row).apply_update(update)
                except (InvalidTransitionError, ValidationError) as exc:
                    logger.error("Rejected update for trade %s: %s", trade_id, exc)
                    return None
                session.merge(trade_to_row(updated))
        except SQLAlchemyError as exc:
            logger.error("Failed to update trade %s: %s", trade_id, exc)
            return None
        return updated

    def delete(self, trade_id: str) -> bool:
        try:
            with self._session_factory.begin() as session:
                row = session.get(TradeRow, trade_id)
                if row is None:
                    logger.error("Cannot delete unknown trade %s", trade_id)
                    return False
                session.delete(row)
        except SQLAlchemyError as exc:
            logger.error("Failed to delete trade %s: %s", trade_id, exc)
            return False
        return True

    def delete_all(self) -> bool:
        try:
            with self._session_factory.begin() as session:
                result = session.execute(delete(TradeRow))
                logger.info("Deleted %d trades", result.rowcount)
        except SQLAlchemyError as exc:
            logger.error("Failed to delete all trades: %s", exc)
            return False
        return True

    def bulk_create(self, trades: Sequence[Trade]) -> list[Trade]:
        if not trades:
            return []
        try:
            with self._session_factory.begin() as session:
                session.add_all([trade_to_row(t) for t in trades])
        except SQLAlchemyError as exc:
            logger.error("Failed to bulk create %d trades: %s", len(trades), exc)
            return []
        return list(trades)

    def fetch_all(self) -> list[Trade]:
        try:
            with self._session_factory() as session:
                rows = session.scalars(
                    select(TradeRow).order_by(TradeRow.entry_time.desc())
                ).all()
                return [row_to_trade(r) for r in rows]
        except (SQLAlchemyError, ValidationError) as exc:
            logger.error("Failed to fetch trades: %s", exc)
            return []

    def close(self) -> None:
        self._engine.dispose()
