"""
Configuration management for WebCalc.

Handles loading configuration from environment variables and ``.env`` files,
and provides sensible defaults for all settings.
"""

import logging
from typing import Literal

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="WEBCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    app_name: str = "WebCalc"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1  # Session state lives in process memory
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # User identification
    user_cookie_name: str = "UserIdentifier"
    user_cookie_max_age_days: int = 7

    # Session storage
    session_backend: Literal["memory"] = "memory"

    # Expression evaluation
    max_expression_length: int = 256


# Global settings instance
settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure structlog to filter below the given (or configured) level."""
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
