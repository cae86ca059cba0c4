# src/config/settings.py — v2
"""Typed configuration loaded from the environment (RFC_*) and .env via pydantic-settings.

Single source of truth for endpoints, cache location, HTTP and display settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from RFC_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="RFC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Endpoints ===
    datatracker_base_url: str = "https://datatracker.ietf.org"
    rfc_editor_base_url: str = "https://www.rfc-editor.org"
    draft_archive_base_url: str = "https://www.ietf.org/archive/id"

    # === Cache ===
    cache_dir: Path | None = None

    # === HTTP ===
    http_timeout_s: float = 30.0

    # === Search ===
    search_default_limit: int = 25
    search_overfetch_factor: int = 5

    # === Display ===
    wrap_width: int = 80

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("datatracker_base_url", "rfc_editor_base_url", "draft_archive_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_positive_values(self) -> Settings:
        errors: list[str] = []

        if self.http_timeout_s <= 0:
            errors.append("HTTP_TIMEOUT_S must be > 0")
        if self.search_default_limit < 1:
            errors.append("SEARCH_DEFAULT_LIMIT must be >= 1")
        if self.search_overfetch_factor < 1:
            errors.append("SEARCH_OVERFETCH_FACTOR must be >= 1")
        if self.wrap_width < 20:
            errors.append("WRAP_WIDTH must be >= 20")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    @property
    def resolved_cache_dir(self) -> Path:
        """Configured cache directory, or the platform default."""
        if self.cache_dir is not None:
            return self.cache_dir.expanduser()
        from rfccli.cache.layout import default_cache_dir

        return default_cache_dir()


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
