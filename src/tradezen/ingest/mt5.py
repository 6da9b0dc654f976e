"""MetaTrader 5 HTML report parser.

The report's "Positions" section already holds complete closed trades,
so it is imported directly without reconciliation.  Row layout::

    0 open time   1 ticket   2 symbol   3 type (buy/sell)   4 (hidden)
    5 volume      6 open price   7 S/L   8 T/P   9 close time
    10 close price   11 commission   12 swap   13 profit
"""

from __future__ import annotations

import logging
from datetime import datetime

from bs4 import BeautifulSoup, Tag

from tradezen.core.enums import Direction, TradeStatus
from tradezen.core.errors import ReportStructureError
from tradezen.core.models import Trade

from .common import parse_number, parse_timestamp

logger = logging.getLogger(__name__)

MT5_TIMESTAMP_FORMAT = "%Y.%m.%d %H:%M:%S"
MIN_POSITION_CELLS = 14

_COL_OPEN_TIME = 0
_COL_TICKET = 1
_COL_SYMBOL = 2
_COL_TYPE = 3
_COL_VOLUME = 5
_COL_OPEN_PRICE = 6
_COL_SL = 7
_COL_TP = 8
_COL_CLOSE_TIME = 9
_COL_CLOSE_PRICE = 10
_COL_COMMISSION = 11
_COL_SWAP = 12
_COL_PROFIT = 13


def _cell_text(cell: Tag) -> str:
    return cell.get_text().replace("\xa0", " ").strip()


def _cell_number(cell: Tag) -> float | None:
    # Reports group thousands with spaces: "1 234.56"
    return parse_number(_cell_text(cell).replace(" ", ""))


def _find_positions_title_row(soup: BeautifulSoup) -> Tag:
    for th in soup.find_all("th"):
        if th.parent is not None and th.parent.name == "tr" and "Positions" in th.get_text():
            return th.parent
    raise ReportStructureError('MT5 report has no "Positions" table')


def _parse_time(text: str) -> datetime | None:
    if not text:
        return None
    return parse_timestamp(text, MT5_TIMESTAMP_FORMAT)


def _row_to_trade(cells: list[Tag], currency: str) -> Trade | None:
    kind = _cell_text(cells[_COL_TYPE]).lower()
    if kind not in ("buy", "sell"):
        return None

    entry_text = _cell_text(cells[_COL_OPEN_TIME])
    symbol = _cell_text(cells[_COL_SYMBOL])
    if not entry_text or not symbol:
        return None

    try:
        entry_time = _parse_time(entry_text)
        exit_time = _parse_time(_cell_text(cells[_COL_CLOSE_TIME]))
    except ValueError:
        logger.debug("Skipping MT5 row with unreadable time: %s", entry_text)
        return None
    commission = _cell_number(cells[_COL_COMMISSION]) or 0.0
    swap = _cell_number(cells[_COL_SWAP]) or 0.0
    profit = _cell_number(cells[_COL_PROFIT]) or 0.0
    closed = exit_time is not None

    return Trade(
        symbol=symbol,
        direction=Direction.LONG if kind == "buy" else Direction.SHORT,
        entry_price=_cell_number(cells[_COL_OPEN_PRICE]) or 0.0,
        exit_price=(_cell_number(cells[_COL_CLOSE_PRICE]) or 0.0) if closed else None,
        units=_cell_number(cells[_COL_VOLUME]) or 0.0,
        entry_time=entry_time,
        exit_time=exit_time,
        stop_loss=_cell_number(cells[_COL_SL]),
        take_profit=_cell_number(cells[_COL_TP]),
        pnl=profit + commission + swap if closed else None,
        pnl_percent=None,
        status=TradeStatus.CLOSED if closed else TradeStatus.OPEN,
        currency=currency,
        notes=f"Import MT5 #{_cell_text(cells[_COL_TICKET])}",
        tags=["MT5", "Imported"],
    )


def parse_mt5_report(html: str, currency: str = "USD") -> list[Trade]:
    """Extract trades from the Positions table of an MT5 HTML report.

    Args:
        html: Report document.
        currency: Account currency the P&L columns are expressed in.

    Raises:
        ReportStructureError: no "Positions" table in the document.
    """
    soup = BeautifulSoup(html, "html.parser")
    title_row = _find_positions_title_row(soup)

    header_row = title_row.find_next_sibling("tr")
    if header_row is None:
        return []

    trades: list[Trade] = []
    row = header_row.find_next_sibling("tr")
    while row is not None:
        if row.find("th") is not None:
            break
        cells = row.find_all("td", recursive=False)
        if len(cells) < MIN_POSITION_CELLS:
            break
        trade = _row_to_trade(cells, currency)
        if trade is not None:
            trades.append(trade)
        row = row.find_next_sibling("tr")

    logger.debug("Parsed MT5 report: %d positions", len(trades))
    return trades
