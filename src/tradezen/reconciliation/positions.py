"""Open-position candidates recovered from the order log.

While the order log is scanned in time order, every market entry that
carried a stop-loss and take-profit becomes a ``PositionState``.  The
``PositionBook`` holds them per symbol until a closed position from the
balance history claims one.  A claimed candidate is removed, so no two
closed positions can share an entry.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator

from tradezen.core.enums import Direction


@dataclass(frozen=True)
class RiskLevels:
    """Stop-loss / take-profit pair and when it was set."""

    time: datetime
    stop_loss: float
    take_profit: float


@dataclass
class PositionState:
    """A position opened in the order log, not yet matched to a close."""

    symbol: str
    entry_time: datetime
    entry_price: float
    units: float
    direction: Direction
    stop_loss: float | None = None
    take_profit: float | None = None
    history: list[RiskLevels] = field(default_factory=list)

    def set_risk(self, levels: RiskLevels) -> None:
        """Record a new SL/TP pair (history is append-only)."""
        self.stop_loss = levels.stop_loss
        self.take_profit = levels.take_profit
        self.history.append(levels)

    def risk_at(self, cutoff: datetime) -> tuple[float | None, float | None]:
        """SL/TP in force at ``cutoff``.

        Returns the last history entry set at or before ``cutoff``; when
        none qualifies, the position's current values.
        """
        in_force = [h for h in self.history if h.time <= cutoff]
        if in_force:
            last = in_force[-1]
            return last.stop_loss, last.take_profit
        return self.stop_loss, self.take_profit


class PositionBook:
    """Position candidates indexed by full symbol (``EXCHANGE:SYMBOL``)."""

    def __init__(self) -> None:
        self._by_symbol: dict[str, list[PositionState]] = defaultdict(list)

    def open(self, position: PositionState) -> None:
        self._by_symbol[position.symbol].append(position)

    def latest(self, symbol: str) -> PositionState | None:
        """Most recently opened candidate for ``symbol``."""
        positions = self._by_symbol.get(symbol)
        return positions[-1] if positions else None

    def candidates(self, symbol: str) -> Iterator[PositionState]:
        """Candidates for ``symbol`` in the order they were opened.

        Iterates over a copy so the caller may ``claim`` while scanning.
        """
        return iter(list(self._by_symbol.get(symbol, ())))

    def claim(self, position: PositionState) -> None:
        """Remove a matched candidate from the pool."""
        positions = self._by_symbol.get(position.symbol)
        if not positions:
            return
        for i, candidate in enumerate(positions):
            if candidate is position:
                del positions[i]
                return

    def __len__(self) -> int:
        return sum(len(p) for p in self._by_symbol.values())
