"""Balance-history export parser.

Each data line records one balance change::

    2026-02-11 13:31:49,133009.73,137127.38,4117.65,USD,"Close short position
    for symbol OANDA:EURUSD at price 1.19018 for 2941176 units. Position AVG
    Price was 1.191580, currency: USD, rate: 1.000000, point value: 1.000000"

Lines that close a position carry the trading fields in the quoted
action text.  Other balance changes (deposits, fees) are kept as events
without trading fields.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime

from tradezen.core.enums import Direction

from .common import TIMESTAMP_PATTERN, data_lines, parse_number, parse_timestamp

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(
    rf"^({TIMESTAMP_PATTERN}),([^,]+),([^,]+),([^,]+),([^,]+),\"(.+)\"$"
)

_CLOSE_RE = re.compile(
    r"Close (long|short) position for symbol ([A-Z]+):([A-Z]+) at price "
    r"([0-9.]+) for ([0-9.]+) units\. Position AVG Price was ([0-9.]+)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class BalanceEvent:
    """One line of balance history."""

    time: datetime
    balance_before: float
    balance_after: float
    pnl: float
    currency: str
    action: str

    # Parsed from ``action`` when it describes a closed position
    direction: Direction | None = None
    exchange: str | None = None
    symbol: str | None = None
    exit_price: float | None = None
    units: float | None = None
    entry_price: float | None = None

    @property
    def full_symbol(self) -> str:
        """``EXCHANGE:SYMBOL`` as it appears in the order log."""
        return f"{self.exchange}:{self.symbol}"

    @property
    def is_trade(self) -> bool:
        """Whether the event carries enough to become a trade."""
        return (
            self.symbol is not None
            and self.direction is not None
            and self.entry_price is not None
            and self.exit_price is not None
        )


def parse_balance_line(line: str) -> BalanceEvent | None:
    """Parse one data line; ``None`` when it does not have the expected shape."""
    match = _LINE_RE.match(line)
    if match is None:
        return None

    numbers = [parse_number(match.group(i)) for i in (2, 3, 4)]
    if any(n is None for n in numbers):
        return None
    balance_before, balance_after, pnl = numbers

    action = match.group(6)
    fields: dict = {}
    close = _CLOSE_RE.search(action)
    if close is not None:
        exit_price = parse_number(close.group(4))
        units = parse_number(close.group(5))
        entry_price = parse_number(close.group(6))
        if None not in (exit_price, units, entry_price):
            fields = {
                "direction": Direction(close.group(1).lower()),
                "exchange": close.group(2),
                "symbol": close.group(3),
                "exit_price": exit_price,
                "units": units,
                "entry_price": entry_price,
            }

    return BalanceEvent(
        time=parse_timestamp(match.group(1)),
        balance_before=balance_before,
        balance_after=balance_after,
        pnl=pnl,
        currency=match.group(5).strip().upper(),
        action=action,
        **fields,
    )


def parse_balance_history(content: str) -> list[BalanceEvent]:
    """Parse a balance-history export (first line is the header).

    Lines that do not match the expected shape are skipped.
    """
    events: list[BalanceEvent] = []
    skipped = 0
    for line in data_lines(content):
        event = parse_balance_line(line)
        if event is None:
            skipped += 1
            continue
        events.append(event)
    logger.debug(
        "Parsed balance history: %d events, %d lines skipped",
        len(events), skipped,
    )
    return events
