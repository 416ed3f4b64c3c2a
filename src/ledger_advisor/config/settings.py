"""Application settings and configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Ledger Advisor"
    app_version: str = "0.1.0"

    log_level: str = "INFO"

    # Zone used to decide what "today" is when no as_of date is supplied
    timezone: str = "Asia/Seoul"

    # Holdings fold
    quantity_epsilon: float = 1e-9

    # Rebalancing: scenarios and trade legs at or below this amount are not proposed
    min_trade_amount: float = 1.0

    # XIRR bisection contract
    xirr_lower_bound: float = -0.99
    xirr_upper_bound: float = 10.0
    xirr_max_iterations: int = 100
    xirr_tolerance: float = 1e-7
    days_per_year: float = 365.25

    # Alert thresholds used when the caller supplies none (disparity ratio, %)
    default_caution_threshold: float = 20.0
    default_warning_threshold: float = 30.0

    # Number of distinct input fingerprints kept by AnalysisService
    analysis_cache_size: int = 32


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
