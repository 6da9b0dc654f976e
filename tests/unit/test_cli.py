"""Test the click command line."""

import json
import logging
from datetime import datetime, timezone

import pytest
import structlog
from click.testing import CliRunner

from tradezen.cli import main
from tradezen.core.clock import WallClock


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("TRADEZEN_STORE__DATABASE_URL", f"sqlite:///{tmp_path / 'journal.db'}")
    monkeypatch.setenv("TRADEZEN_RATES__CACHE_PATH", str(tmp_path / "rates.json"))
    monkeypatch.setenv("TRADEZEN_OBSERVABILITY__LOG_LEVEL", "WARNING")
    return CliRunner()


@pytest.fixture
def exports(tmp_path, make_balance_csv, make_order_csv, eurusd_close, eurusd_entry):
    balance = tmp_path / "balance.csv"
    balance.write_text(make_balance_csv(eurusd_close), encoding="utf-8")
    orders = tmp_path / "orders.csv"
    orders.write_text(make_order_csv(eurusd_entry), encoding="utf-8")
    return balance, orders


class TestImportCommand:
    def test_import_balance_and_orders(self, runner, exports):
        balance, orders = exports
        result = runner.invoke(main, ["import", "--balance", str(balance), "--orders", str(orders)])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["saved"] == 0
        assert payload["preview"]["with_risk_levels"] == 1
        trade = payload["trades"][0]
        assert trade["stop_loss"] == 1.19278
        assert trade["direction"] == "short"
        assert trade["status"] == "closed"

    def test_import_save_then_stats(self, runner, exports):
        balance, orders = exports
        saved = runner.invoke(main, ["import", "--balance", str(balance), "--orders", str(orders), "--save"])
        assert saved.exit_code == 0, saved.output
        assert json.loads(saved.stdout)["saved"] == 1

        result = runner.invoke(main, ["stats", "--no-refresh-rates", "--daily"])
        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report["stats"]["total_trades"] == 1
        assert report["stats"]["total_pnl"] == pytest.approx(4117.65)
        assert report["daily"][0]["date"] == "2026-02-11"

    def test_stats_in_other_currency(self, runner, exports):
        balance, _ = exports
        runner.invoke(main, ["import", "--balance", str(balance), "--save"])
        result = runner.invoke(main, ["stats", "--no-refresh-rates", "--currency", "eur"])
        report = json.loads(result.stdout)
        assert report["stats"]["base_currency"] == "EUR"
        assert "daily" not in report

    @pytest.mark.parametrize(
        ("time_range", "expected"),
        [("7d", 0), ("30d", 1), ("ytd", 1), ("all", 1)],
    )
    def test_stats_time_range(self, runner, exports, monkeypatch, time_range, expected):
        monkeypatch.setattr(WallClock, "now", lambda self: datetime(2026, 2, 20, tzinfo=timezone.utc))
        balance, orders = exports
        runner.invoke(main, ["import", "--balance", str(balance), "--orders", str(orders), "--save"])
        result = runner.invoke(main, ["stats", "--no-refresh-rates", "--range", time_range])
        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report["range"] == time_range
        assert report["stats"]["total_trades"] == expected
        assert len(report["monthly"]) == expected

    def test_stats_rejects_unknown_range(self, runner):
        assert runner.invoke(main, ["stats", "--range", "2w"]).exit_code == 2

    def test_import_nothing_found(self, runner, tmp_path, make_balance_csv):
        empty = tmp_path / "empty.csv"
        empty.write_text(make_balance_csv("not a line"), encoding="utf-8")
        result = runner.invoke(main, ["import", "--balance", str(empty)])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["message"] == "No trades found in balance history"

    def test_empty_balance_stops_before_order_log(self, runner, tmp_path, make_balance_csv, exports):
        _, orders = exports
        empty = tmp_path / "empty.csv"
        empty.write_text(make_balance_csv("not a line"), encoding="utf-8")
        result = runner.invoke(main, ["import", "--balance", str(empty), "--orders", str(orders)])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["ok"] is False
        assert payload["message"] == "No trades found in balance history"

    def test_import_mt5_without_positions(self, runner, tmp_path):
        report = tmp_path / "report.html"
        report.write_text("<html><body>empty</body></html>", encoding="utf-8")
        result = runner.invoke(main, ["import", "--mt5", str(report)])
        assert result.exit_code == 1
        assert "Positions" in result.output

    def test_import_requires_a_file(self, runner):
        result = runner.invoke(main, ["import"])
        assert result.exit_code == 2

    def test_mt5_cannot_mix_with_csv(self, runner, exports, tmp_path):
        balance, _ = exports
        report = tmp_path / "report.html"
        report.write_text("<html></html>", encoding="utf-8")
        result = runner.invoke(main, ["import", "--balance", str(balance), "--mt5", str(report)])
        assert result.exit_code == 2


class TestOtherCommands:
    def test_rates_snapshot(self, runner):
        result = runner.invoke(main, ["rates"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["fetched_at"] is None
        assert payload["rates"]["USC"] == 0.01

    def test_reset_requires_yes(self, runner):
        assert runner.invoke(main, ["reset"]).exit_code == 2

    def test_reset(self, runner, exports):
        balance, _ = exports
        runner.invoke(main, ["import", "--balance", str(balance), "--save"])
        assert runner.invoke(main, ["reset", "--yes"]).exit_code == 0
        result = runner.invoke(main, ["stats", "--no-refresh-rates"])
        assert json.loads(result.stdout)["stats"]["total_trades"] == 0

    def test_invalid_config(self, runner, monkeypatch):
        monkeypatch.setenv("TRADEZEN_BASE_CURRENCY", "not-a-code")
        result = runner.invoke(main, ["rates"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
