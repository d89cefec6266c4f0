"""
eve-swagger Centralized Configuration

Provides validated, type-safe access to all environment variables using Pydantic Settings.

Usage:
    from eve_swagger.core.config import get_settings

    settings = get_settings()
    if settings.log_level == "DEBUG":
        ...

Environment Variables:
    EVE_SWAGGER_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    EVE_SWAGGER_DEBUG: Legacy debug flag (enables DEBUG level if set)
    EVE_SWAGGER_LOG_JSON: Output logs as JSON
    EVE_SWAGGER_NO_RETRY: Disable HTTP retry logic
    EVE_SWAGGER_BASE_URL: ESI base URL
    EVE_SWAGGER_DATASOURCE: ESI datasource (tranquility, singularity)
    EVE_SWAGGER_USER_AGENT: User-Agent header sent with every request
    EVE_SWAGGER_TIMEOUT: Request timeout in seconds
    EVE_SWAGGER_MAX_CONCURRENCY: Parallel requests issued by mapped resources
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_USER_AGENT, ESI_BASE_URL, ESI_DATASOURCE


def _find_project_env_file() -> Path | None:
    """
    Find .env file by searching for project root markers.

    Searches upward from this file's location for pyproject.toml,
    then checks for .env in that directory.

    Returns:
        Path to .env if found, None otherwise
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            env_file = current / ".env"
            if env_file.exists():
                return env_file
            return None
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


_ENV_FILE = _find_project_env_file()


class ESISettings(BaseSettings):
    """
    eve-swagger configuration settings with validation.

    Environment variables are automatically loaded with the EVE_SWAGGER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="EVE_SWAGGER_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for eve-swagger components",
    )

    debug: bool = Field(
        default=False,
        description="Legacy debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    # =========================================================================
    # Transport
    # =========================================================================

    no_retry: bool = Field(
        default=False,
        description="Disable HTTP retry logic (tenacity)",
    )

    base_url: str = Field(
        default=ESI_BASE_URL,
        description="ESI base URL including version segment",
    )

    datasource: str = Field(
        default=ESI_DATASOURCE,
        description="ESI datasource query parameter",
    )

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header identifying the application to CCP",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )

    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=1,
        description="Maximum parallel requests issued when mapping over ids",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting legacy EVE_SWAGGER_DEBUG.

        Priority:
        1. Explicit EVE_SWAGGER_LOG_LEVEL
        2. EVE_SWAGGER_DEBUG=1 -> DEBUG
        3. Default: WARNING
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> ESISettings:
    """
    Get the singleton settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return ESISettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()


# =============================================================================
# Convenience Function
# =============================================================================


def is_retry_disabled() -> bool:
    """Check if retry logic is disabled via environment."""
    return get_settings().no_retry
