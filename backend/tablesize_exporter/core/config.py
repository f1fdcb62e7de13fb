"""Exporter settings loaded from the environment."""

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StalePolicy(str, Enum):
    """What happens to series whose table vanished from the catalog."""

    keep = "keep"
    drop = "drop"


class Settings(BaseSettings):
    """Exporter configuration.

    The database fields have no meaningful defaults.  Leaving them unset is
    not a startup error: the first refresh cycle fails to connect and logs
    it, while the metrics endpoint keeps serving.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_HOST: str = ""
    DB_NAME: str = ""

    # Refresh loop
    REFRESH_INTERVAL: float = Field(default=30.0, gt=0)
    CONNECT_TIMEOUT: float = Field(default=10.0, gt=0)
    QUERY_TIMEOUT: float = Field(default=20.0, gt=0)
    STALE_POLICY: StalePolicy = StalePolicy.keep

    # Metrics endpoint
    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = Field(default=9100, ge=1, le=65535)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False

    @field_validator("STALE_POLICY", mode="before")
    @classmethod
    def normalize_stale_policy(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
