from __future__ import annotations

"""
Configuration loader for zkattest.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Exposes a cached `get_settings()` accessor.

Environment variables:
    ZKATTEST_SEQUENTIAL_START_ID  (int, default 1)        : first id accepted in sequential mode
    ZKATTEST_ENFORCE_SEQUENTIAL   (bool, default False)   : initial flag for new registries
    ZKATTEST_LOG_LEVEL            (str, default "INFO")   : Logging level
    ZKATTEST_LOG_FORMAT           (str, default "console"): "console" or "json"
    ZKATTEST_METRICS_ENABLED      (bool, default True)    : record Prometheus metrics
    ZKATTEST_EVENT_LOG_LIMIT      (int, default 10000)    : events kept in memory per registry or role table
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    sequential_start_id: int = Field(
        1, ge=0, description="First id accepted when sequential enforcement is on."
    )
    enforce_sequential: bool = Field(
        False, description="Sequential enforcement flag for newly created registries."
    )
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: str = Field("console", description='"console" or "json"')
    metrics_enabled: bool = True
    event_log_limit: int = Field(
        10_000, ge=1, description="Most recent events kept in memory; older ones are dropped."
    )

    model_config = SettingsConfigDict(
        env_prefix="ZKATTEST_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper()

    @field_validator("log_format", mode="before")
    @classmethod
    def _check_format(cls, v):
        s = str(v).strip().lower()
        if s not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return s


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings_cache() -> None:
    """Drop the cached Settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
