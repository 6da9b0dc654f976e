"""Test the balance-history parser."""

from datetime import datetime, timezone

from tradezen.core.enums import Direction
from tradezen.ingest.balance import parse_balance_history, parse_balance_line


class TestParseBalanceLine:
    def test_close_line(self, eurusd_close):
        event = parse_balance_line(eurusd_close)
        assert event is not None
        assert event.time == datetime(2026, 2, 11, 13, 31, 49, tzinfo=timezone.utc)
        assert event.balance_before == 133009.73
        assert event.balance_after == 137127.38
        assert event.pnl == 4117.65
        assert event.currency == "USD"
        assert event.direction == Direction.SHORT
        assert event.exchange == "OANDA"
        assert event.symbol == "EURUSD"
        assert event.full_symbol == "OANDA:EURUSD"
        assert event.exit_price == 1.19018
        assert event.units == 2941176
        assert event.entry_price == 1.19158
        assert event.is_trade

    def test_non_trade_balance_change_is_kept(self):
        event = parse_balance_line(
            '2026-02-10 08:00:00,100000.00,100500.00,500.00,USD,"Deposit"'
        )
        assert event is not None
        assert event.pnl == 500.0
        assert event.symbol is None
        assert not event.is_trade

    def test_long_close(self):
        event = parse_balance_line(
            '2026-02-12 10:00:00,1000,1010,10,EUR,"Close long position for '
            'symbol OANDA:XAUUSD at price 2050.5 for 10 units. Position AVG '
            'Price was 2049.5"'
        )
        assert event.direction == Direction.LONG
        assert event.currency == "EUR"
        assert event.symbol == "XAUUSD"

    def test_unquoted_action_is_rejected(self):
        assert parse_balance_line("2026-02-11 13:31:49,1,2,1,USD,Close") is None

    def test_bad_timestamp_is_rejected(self):
        assert parse_balance_line('11/02/2026 13:31,1,2,1,USD,"x"') is None

    def test_non_numeric_balance_is_rejected(self):
        assert parse_balance_line('2026-02-11 13:31:49,abc,2,1,USD,"x"') is None


class TestParseBalanceHistory:
    def test_header_skipped(self, make_balance_csv, eurusd_close):
        events = parse_balance_history(make_balance_csv(eurusd_close))
        assert len(events) == 1

    def test_malformed_lines_skipped(self, make_balance_csv, eurusd_close):
        content = make_balance_csv("garbage", "", eurusd_close, "2026-02-11,oops")
        events = parse_balance_history(content)
        assert [e.symbol for e in events] == ["EURUSD"]

    def test_crlf_line_endings(self, make_balance_csv, eurusd_close):
        content = make_balance_csv(eurusd_close, eurusd_close).replace("\n", "\r\n")
        assert len(parse_balance_history(content)) == 2

    def test_empty_content(self):
        assert parse_balance_history("") == []
