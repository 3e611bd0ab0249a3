"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class EngineConfig(BaseModel):
    """Thresholds and constants used by the analytics engine.

    The revenge-trading and overtrading constants are heuristics without
    an empirical basis; they are exposed here so a deployment can tune
    them.
    """

    # Sample-size gates
    min_trades: int = Field(default=3, ge=1)  # Below this: insufficient data
    min_group_samples: int = Field(default=2, ge=1)  # For best/worst groups
    recency_window: int = Field(default=20, ge=1)  # "Recent" = last N trades

    # Performance
    annual_risk_free_rate: float = 0.06
    trading_days_per_year: int = Field(default=252, ge=1)

    # Behaviour
    high_confidence_threshold: float = 8.0  # On a 1-10 self-rating scale
    default_risk_pct: float = Field(default=0.05, ge=0)  # Assumed when no stop
    conservative_risk_pct: float = 0.02
    moderate_risk_pct: float = 0.05
    overtrading_low: float = 5.0  # Trades/day where risk starts rising
    overtrading_high: float = 10.0  # Trades/day where risk hits 100
    revenge_size_increase: float = 0.20  # Next notional > prev * 1.2
    revenge_window_minutes: float = 60.0
    revenge_risk_multiplier: float = 500.0

    # Predictive
    kelly_floor: float = Field(default=0.01, ge=0)
    kelly_cap: float = Field(default=0.25, le=1)
    momentum_high: float = 0.6
    momentum_low: float = 0.4
    drawdown_warning_pct: float = 20.0
    recent_win_rate_warning: float = 0.3
    behavior_warning_score: float = 50.0
    max_suggestions: int = Field(default=3, ge=1)

    # Execution
    parallel: bool = False  # Run independent stages in a thread pool

    @model_validator(mode="after")
    def _check_ranges(self) -> EngineConfig:
        if self.overtrading_high <= self.overtrading_low:
            raise ValueError("overtrading_high must exceed overtrading_low")
        if self.kelly_floor > self.kelly_cap:
            raise ValueError("kelly_floor must not exceed kelly_cap")
        if self.momentum_low > self.momentum_high:
            raise ValueError("momentum_low must not exceed momentum_high")
        if self.conservative_risk_pct > self.moderate_risk_pct:
            raise ValueError("conservative_risk_pct must not exceed moderate_risk_pct")
        return self

    @property
    def daily_risk_free_rate(self) -> float:
        return self.annual_risk_free_rate / self.trading_days_per_year


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables
    (``TRADE_INSIGHTS_ENGINE__MIN_TRADES=5``).
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADE_INSIGHTS_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: If the file is missing or the values do not validate.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        import tomli

        with open(path, "rb") as f:
            try:
                data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
