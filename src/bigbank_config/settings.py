"""Connector settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. BIGBANK_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production

All variables use the BIGBANK_ prefix, e.g. BIGBANK_LOG_LEVEL=DEBUG.
Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. BIGBANK_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("BIGBANK_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Connector configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="BIGBANK_",
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Endpoints
    auth_base_url: str = "https://auth.bigbank.eu"
    banking_base_url: str = "https://banking.bigbank.de"

    # HTTP client
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    language: str = "de-de"
    user_agent: str = "bigbank-connector/1.0"

    # Transaction history
    history_years: int = Field(default=3, ge=1)
    statement_page_size: int = Field(default=100, ge=1)
    statement_max_pages: int = Field(default=500, ge=1)

    # Normalization
    default_currency: str = Field(default="EUR", min_length=3, max_length=3)
    timezone: str = "Europe/Berlin"

    # Logging
    log_level: str = "INFO"

    @field_validator("auth_base_url", "banking_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        ZoneInfo(v)  # raises for unknown zones
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache()
def get_settings() -> Settings:
    """Return cached connector settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
