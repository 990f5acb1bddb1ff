"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to .env file
  - Validate types and constraints at construction

The base URL is read once and injected into the request builder; it is
never changed while the process runs.

Only AppSettings is a BaseSettings instance. ApiSettings is a plain
BaseModel populated via env_nested_delimiter="__", so API__BASE_URL maps
to api.base_url and API__TIMEOUT_SECONDS to api.timeout_seconds.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env file relative to the project root (two levels above this file).
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class ApiSettings(BaseModel):
    """Backend endpoint configuration."""

    base_url: str = Field(
        default="http://localhost:8080",
        description="Absolute http(s) base URL; resource paths are appended to it",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout carried by every request descriptor",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Reject relative or non-http URLs and drop a trailing slash."""
        value = value.strip().rstrip("/")
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"base_url is not a valid URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    log_level: str = Field(default="INFO")
