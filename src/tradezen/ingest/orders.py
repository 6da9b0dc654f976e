"""Order-log export parser.

Order logs are ``timestamp,free text`` lines.  Only some lines carry
trade data, and a single line may carry several pieces of it (an order
id *and* an execution price, say).  Each extractor below looks for one
message shape and contributes the fields it finds; every extractor is
tried on every line and later extractors win on overlapping fields.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from tradezen.core.enums import OrderAction

from .common import TIMESTAMP_PATTERN, data_lines, parse_number, parse_timestamp

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(rf"^({TIMESTAMP_PATTERN}),(.+)$")

_ORDER_ID_RE = re.compile(r"Order (\d+)")
_SYMBOL_RE = re.compile(r"symbol ([A-Z]+:[A-Z]+)")
_EXECUTED_RE = re.compile(
    r"has been executed at price ([0-9.]+) for ([0-9.]+) units"
)
_MARKET_WITH_RISK_RE = re.compile(
    r"Call to place market order to (buy|sell) ([0-9.]+) units of symbol "
    r"([A-Z:]+) with SL ([0-9.]+) and TP ([0-9.]+)"
)
_MARKET_PLAIN_RE = re.compile(
    r"Call to place market order to (buy|sell) ([0-9.]+) units of symbol "
    r"([A-Z:]+)(?:\s*)$"
)
_LIMIT_RE = re.compile(
    r"Call to place limit order to (buy|sell) ([0-9.]+) units of symbol "
    r"([A-Z:]+) at price ([0-9.]+) with SL ([0-9.]+) and TP ([0-9.]+)"
)
_MODIFY_RE = re.compile(
    r"Modify position for symbol ([A-Z:]+) with SL ([0-9.]+) and TP ([0-9.]+)"
)


@dataclass(frozen=True)
class OrderEvent:
    """One line of the order log with whatever trade data it carries."""

    time: datetime
    text: str

    order_id: str | None = None
    symbol: str | None = None
    action: OrderAction | None = None
    price: float | None = None
    units: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    is_entry: bool | None = None

    @property
    def has_risk_levels(self) -> bool:
        return bool(self.stop_loss) and bool(self.take_profit)

    @property
    def is_market_entry(self) -> bool:
        """A buy/sell call that opened a position with SL and TP attached."""
        return (
            self.action in (OrderAction.BUY, OrderAction.SELL)
            and bool(self.is_entry)
            and self.has_risk_levels
        )


Extractor = Callable[[str], dict[str, Any]]


def _order_id(text: str) -> dict[str, Any]:
    m = _ORDER_ID_RE.search(text)
    return {"order_id": m.group(1)} if m else {}


def _symbol(text: str) -> dict[str, Any]:
    m = _SYMBOL_RE.search(text)
    return {"symbol": m.group(1)} if m else {}


def _executed(text: str) -> dict[str, Any]:
    m = _EXECUTED_RE.search(text)
    if not m:
        return {}
    return {
        "action": OrderAction.EXECUTE,
        "price": parse_number(m.group(1)),
        "units": parse_number(m.group(2)),
    }


def _market_with_risk(text: str) -> dict[str, Any]:
    m = _MARKET_WITH_RISK_RE.search(text)
    if not m:
        return {}
    return {
        "action": OrderAction(m.group(1)),
        "units": parse_number(m.group(2)),
        "symbol": m.group(3),
        "stop_loss": parse_number(m.group(4)),
        "take_profit": parse_number(m.group(5)),
        "is_entry": True,
    }


def _market_plain(text: str) -> dict[str, Any]:
    # No SL/TP attached: usually the order that closes a position.
    m = _MARKET_PLAIN_RE.search(text)
    if not m:
        return {}
    return {
        "action": OrderAction(m.group(1)),
        "units": parse_number(m.group(2)),
        "symbol": m.group(3),
        "is_entry": False,
    }


def _limit(text: str) -> dict[str, Any]:
    m = _LIMIT_RE.search(text)
    if not m:
        return {}
    return {
        "action": OrderAction.LIMIT,
        "units": parse_number(m.group(2)),
        "symbol": m.group(3),
        "price": parse_number(m.group(4)),
        "stop_loss": parse_number(m.group(5)),
        "take_profit": parse_number(m.group(6)),
        "is_entry": True,
    }


def _modify(text: str) -> dict[str, Any]:
    m = _MODIFY_RE.search(text)
    if not m:
        return {}
    return {
        "action": OrderAction.MODIFY,
        "symbol": m.group(1),
        "stop_loss": parse_number(m.group(2)),
        "take_profit": parse_number(m.group(3)),
    }


EXTRACTORS: tuple[Extractor, ...] = (
    _order_id,
    _symbol,
    _executed,
    _market_with_risk,
    _market_plain,
    _limit,
    _modify,
)


def parse_order_line(line: str) -> OrderEvent | None:
    """Parse one data line; ``None`` when it has no leading timestamp."""
    match = _LINE_RE.match(line)
    if match is None:
        return None

    # Some exports quote the message column.
    text = match.group(2).strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        text = text[1:-1]

    fields: dict[str, Any] = {}
    for extract in EXTRACTORS:
        fields.update(extract(text))

    return OrderEvent(time=parse_timestamp(match.group(1)), text=text, **fields)


def parse_order_log(content: str) -> list[OrderEvent]:
    """Parse an order-log export (first line is the header).

    Informational lines without trade data are kept as bare events;
    only lines without a leading timestamp are dropped.
    """
    events: list[OrderEvent] = []
    for line in data_lines(content):
        event = parse_order_line(line)
        if event is not None:
            events.append(event)
    logger.debug("Parsed order log: %d events", len(events))
    return events
