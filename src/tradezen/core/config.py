"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class RatesConfig(BaseModel):
    source_url: str = "https://api.frankfurter.app/latest?from=USD"
    cache_path: str = "~/.tradezen/exchange_rates.json"
    ttl_hours: float = 24.0
    timeout_seconds: float = 10.0

    @property
    def resolved_cache_path(self) -> Path:
        return Path(self.cache_path).expanduser()


class ReconcileConfig(BaseModel):
    execution_window_seconds: float = 5.0  # entry call -> execution confirmation
    risk_scan_window_seconds: float = 10.0  # execution -> nearby SL/TP orders
    price_tolerance: float = 0.001  # relative, 0.1%
    unit_tolerance: float = 1.0
    estimated_hold_hours: float = 2.0
    big_trade_threshold: float = 5000.0
    good_trade_threshold: float = 1000.0

    @field_validator(
        "execution_window_seconds",
        "risk_scan_window_seconds",
        "price_tolerance",
        "unit_tolerance",
        "estimated_hold_hours",
    )
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be >= 0")
        return value


class StoreConfig(BaseModel):
    database_url: str = "sqlite:///tradezen.db"


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    base_currency: str = "USD"

    rates: RatesConfig = Field(default_factory=RatesConfig)
    reconcile: ReconcileConfig = Field(default_factory=ReconcileConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADEZEN_", "env_nested_delimiter": "__"}

    @field_validator("base_currency")
    @classmethod
    def _currency_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not (3 <= len(code) <= 4 and code.isalpha()):
            raise ValueError(f"invalid currency code {value!r}")
        return code


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: if the merged values fail validation.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
