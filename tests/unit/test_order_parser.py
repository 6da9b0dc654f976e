"""Test the order-log parser and its extractors."""

from tradezen.core.enums import OrderAction
from tradezen.ingest.orders import parse_order_line, parse_order_log


class TestParseOrderLine:
    def test_market_entry_with_risk(self, eurusd_entry):
        event = parse_order_line(eurusd_entry)
        assert event.action == OrderAction.SELL
        assert event.units == 2941176
        assert event.symbol == "OANDA:EURUSD"
        assert event.stop_loss == 1.19278
        assert event.take_profit == 1.18972
        assert event.is_entry is True
        assert event.is_market_entry

    def test_market_order_without_risk_is_closing(self):
        event = parse_order_line(
            "2026-02-11 13:31:48,Call to place market order to buy 2941176 "
            "units of symbol OANDA:EURUSD"
        )
        assert event.action == OrderAction.BUY
        assert event.is_entry is False
        assert not event.is_market_entry

    def test_execution_carries_order_id_too(self):
        event = parse_order_line(
            "2026-02-11 11:02:11,Order 123456 for symbol OANDA:EURUSD has been "
            "executed at price 1.19158 for 2941176 units"
        )
        assert event.order_id == "123456"
        assert event.symbol == "OANDA:EURUSD"
        assert event.action == OrderAction.EXECUTE
        assert event.price == 1.19158
        assert event.units == 2941176

    def test_limit_order(self):
        event = parse_order_line(
            "2026-02-11 09:00:00,Call to place limit order to buy 100 units of "
            "symbol OANDA:XAUUSD at price 2040.5 with SL 2030 and TP 2060"
        )
        assert event.action == OrderAction.LIMIT
        assert event.price == 2040.5
        assert event.stop_loss == 2030
        assert event.take_profit == 2060
        assert event.is_entry is True
        assert not event.is_market_entry

    def test_modify_position(self):
        event = parse_order_line(
            "2026-02-11 12:00:00,Modify position for symbol OANDA:EURUSD "
            "with SL 1.1920 and TP 1.1880"
        )
        assert event.action == OrderAction.MODIFY
        assert event.symbol == "OANDA:EURUSD"
        assert event.has_risk_levels

    def test_quoted_message(self, eurusd_entry):
        stamp, text = eurusd_entry.split(",", 1)
        event = parse_order_line(f'{stamp},"{text}"')
        assert event.text == text
        assert event.is_market_entry

    def test_informational_line_kept_bare(self):
        event = parse_order_line("2026-02-11 12:00:00,Session started")
        assert event is not None
        assert event.action is None
        assert event.symbol is None

    def test_line_without_timestamp(self):
        assert parse_order_line("Heure,Texte") is None


def test_parse_order_log_skips_header(make_order_csv, eurusd_entry):
    events = parse_order_log(make_order_csv(eurusd_entry, "no timestamp here"))
    assert len(events) == 1
    assert events[0].symbol == "OANDA:EURUSD"
