"""
Application configuration and settings.

Configuration values are loaded from environment variables (or a local
``.env`` file) using `pydantic-settings`. The engines themselves are not
configured here: their business constants live in per-engine tuning
tables so they can be audited next to the code that applies them.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed runtime settings for the Settlement Tracker.

    All configuration options are read from environment variables at
    application startup. Every option has a default so the library can be
    imported without any environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    env: str = Field("dev", validation_alias="SETTLE_ENV", description="Runtime environment.")
    log_level: str = Field("INFO", validation_alias="SETTLE_LOG_LEVEL", description="Logging level.")
    trace_engines: bool = Field(
        False,
        validation_alias="SETTLE_TRACE_ENGINES",
        description="Log the engines' anchor and clamp decisions at DEBUG level.",
    )
    app_title: str = Field(
        "Settlement Tracker API",
        validation_alias="SETTLE_APP_TITLE",
        description="Title reported in the OpenAPI schema.",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias="SETTLE_CORS_ORIGINS",
        description="Origins allowed to call the API from a browser.",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        valid = {"dev", "test", "prod"}
        if value not in valid:
            raise ValueError(f"SETTLE_ENV must be one of {valid}, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if value.upper() not in valid:
            raise ValueError(f"SETTLE_LOG_LEVEL must be one of {valid}, got {value}")
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    return Settings()
