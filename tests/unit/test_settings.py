"""Test Settings loading and validation."""

import pytest

from tradezen.core.config import ReconcileConfig, Settings, load_settings
from tradezen.core.errors import ConfigError


class TestSettingsDefaults:
    def test_default_settings(self):
        settings = Settings()
        assert settings.base_currency == "USD"
        assert settings.store.database_url == "sqlite:///tradezen.db"
        assert settings.observability.log_format == "console"

    def test_reconcile_defaults(self):
        cfg = ReconcileConfig()
        assert cfg.execution_window_seconds == 5.0
        assert cfg.risk_scan_window_seconds == 10.0
        assert cfg.price_tolerance == 0.001
        assert cfg.unit_tolerance == 1.0
        assert cfg.estimated_hold_hours == 2.0

    def test_rates_defaults(self):
        settings = Settings()
        assert settings.rates.ttl_hours == 24.0
        assert settings.rates.resolved_cache_path.name == "exchange_rates.json"
        assert "~" not in str(settings.rates.resolved_cache_path)


class TestBaseCurrency:
    def test_upper_cased(self):
        assert Settings(base_currency="eur").base_currency == "EUR"

    def test_four_letter_code(self):
        assert Settings(base_currency="usdt").base_currency == "USDT"

    @pytest.mark.parametrize("code", ["", "US", "EURO1", "12$"])
    def test_rejects_bad_codes(self, code):
        with pytest.raises(ConfigError):
            load_settings(overrides={"base_currency": code})

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TRADEZEN_BASE_CURRENCY", "gbp")
        assert load_settings().base_currency == "GBP"


class TestLoadSettings:
    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(config_path=tmp_path / "absent.toml")
        assert settings.base_currency == "USD"

    def test_toml_file(self, tmp_path):
        path = tmp_path / "tradezen.toml"
        path.write_text(
            'base_currency = "EUR"\n'
            "\n"
            "[reconcile]\n"
            "estimated_hold_hours = 4\n"
            "\n"
            "[store]\n"
            'database_url = "sqlite:///:memory:"\n'
        )
        settings = load_settings(config_path=path)
        assert settings.base_currency == "EUR"
        assert settings.reconcile.estimated_hold_hours == 4.0
        assert settings.store.database_url == "sqlite:///:memory:"

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "tradezen.toml"
        path.write_text('base_currency = "EUR"\n')
        settings = load_settings(config_path=path, overrides={"base_currency": "JPY"})
        assert settings.base_currency == "JPY"

    def test_negative_window_is_config_error(self):
        with pytest.raises(ConfigError, match="must be >= 0"):
            load_settings(overrides={"reconcile": {"execution_window_seconds": -1}})
