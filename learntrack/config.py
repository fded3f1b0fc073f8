"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Local keyed store
    DATABASE_URL: str = "sqlite:///learntrack.db"

    PROJECT_NAME: str = "LearnTrack"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # Auth
    PASSWORD_PEPPER: str = ""
    MIN_PASSWORD_LENGTH: int = 6

    # Registration
    ALLOW_USER_REGISTRATIONS: bool = True

    # Session timer
    SESSION_MAX_SECONDS: int = 10800
    SESSION_TICK_SECONDS: float = 1.0

    # Dashboard
    UPCOMING_DEADLINES_LIMIT: int = 3

    @field_validator("SESSION_MAX_SECONDS", mode="after")
    @classmethod
    def validate_session_ceiling(cls, value: int) -> int:
        """Session ceiling must be a positive number of seconds."""
        if value <= 0:
            msg = "SESSION_MAX_SECONDS must be positive"
            raise ValueError(msg)
        return value


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    # JSON output in production, coloured console output otherwise
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
