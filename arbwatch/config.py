"""
Configuration management for the arbwatch opportunity engine.
Uses Pydantic for validation and type safety.
"""

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitorConfig(BaseSettings):
    """Polling configuration for the source monitors."""

    crypto_poll_interval_seconds: float = Field(300.0, alias="CRYPTO_POLL_INTERVAL_SECONDS")
    sports_poll_interval_seconds: float = Field(30.0, alias="SPORTS_POLL_INTERVAL_SECONDS")
    prediction_poll_interval_seconds: float = Field(60.0, alias="PREDICTION_POLL_INTERVAL_SECONDS")

    # Optional JSON odds feed; the simulated bookmaker feed is used when empty
    sports_feed_url: str = Field("", alias="SPORTS_FEED_URL")
    source_timeout_seconds: float = Field(10.0, alias="SOURCE_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator(
        "crypto_poll_interval_seconds",
        "sports_poll_interval_seconds",
        "prediction_poll_interval_seconds",
        "source_timeout_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Interval must be greater than zero")
        return v


class AutonomousConfig(BaseSettings):
    """Autonomous evaluation loop configuration."""

    evaluation_interval_seconds: float = Field(10.0, alias="EVALUATION_INTERVAL_SECONDS")

    # Pre-filters applied before the evaluator sees an opportunity
    crypto_min_confidence: float = Field(0.7, alias="CRYPTO_MIN_CONFIDENCE")
    sports_min_profit_pct: float = Field(1.0, alias="SPORTS_MIN_PROFIT_PCT")
    prediction_min_profit_pct: float = Field(0.5, alias="PREDICTION_MIN_PROFIT_PCT")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class ExecutionConfig(BaseSettings):
    """Simulated execution configuration."""

    execution_log_capacity: int = Field(100, alias="EXECUTION_LOG_CAPACITY")
    status_log_tail: int = Field(10, alias="STATUS_LOG_TAIL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class FeeConfig(BaseSettings):
    """Cost model for cross-venue prediction market trades."""

    centralized_fee: float = Field(0.02, alias="CENTRALIZED_FEE")
    default_gas_cost: float = Field(0.01, alias="DEFAULT_GAS_COST")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("centralized_fee", "default_gas_cost")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("Fee must be between 0.0 and 1.0")
        return v


class SimulationConfig(BaseSettings):
    """Settings for the simulated sources."""

    simulation_seed: Optional[int] = Field(None, alias="SIMULATION_SEED")
    bookmakers: str = Field(
        "BookmakerA,BookmakerB,BookmakerC,BookmakerD", alias="BOOKMAKERS"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def bookmaker_list(self) -> List[str]:
        return [b.strip() for b in self.bookmakers.split(",") if b.strip()]


class MonitoringConfig(BaseSettings):
    """Logging configuration."""

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class DevelopmentConfig(BaseSettings):
    """Development and testing configuration."""

    debug_mode: bool = Field(False, alias="DEBUG_MODE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class BotConfig:
    """Master configuration class that aggregates all config sections."""

    def __init__(self):
        self.monitors = MonitorConfig()
        self.autonomous = AutonomousConfig()
        self.execution = ExecutionConfig()
        self.fees = FeeConfig()
        self.simulation = SimulationConfig()
        self.monitoring = MonitoringConfig()
        self.development = DevelopmentConfig()

    @property
    def is_debug(self) -> bool:
        return self.development.debug_mode


# Global config instance
_config: Optional[BotConfig] = None


def get_config() -> BotConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = BotConfig()
    return _config


def reload_config() -> BotConfig:
    """Force reload configuration from environment."""
    global _config
    _config = BotConfig()
    return _config
