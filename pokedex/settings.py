"""Centralized configuration management for the Pokédex client."""

from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env before any settings instance is created so CLI invocations
# and tests share the same view of the environment.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_API_BASE_URL = "http://localhost:4000"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_DETAIL_CACHE_TTL_SECONDS = 300
DEFAULT_LOG_LEVEL = "INFO"


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    The catalog/favorites service is reached through a single base URL. The
    remaining knobs tune the HTTP client, the detail cache, and logging.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        validation_alias=AliasChoices(
            "api_base_url", "POKEDEX_API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL"
        ),
        description=(
            "Base URL of the catalog/favorites service. Falls back to a local"
            " development server when unset."
        ),
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        gt=0,
        validation_alias=AliasChoices(
            "request_timeout_seconds", "POKEDEX_REQUEST_TIMEOUT"
        ),
        description="Per-request timeout applied by the HTTP client.",
    )
    detail_cache_ttl_seconds: int = Field(
        default=DEFAULT_DETAIL_CACHE_TTL_SECONDS,
        ge=0,
        validation_alias=AliasChoices(
            "detail_cache_ttl_seconds", "POKEDEX_DETAIL_CACHE_TTL"
        ),
        description="Lifetime of lazily fetched Pokémon detail payloads.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        validation_alias=AliasChoices("log_level", "LOG_LEVEL"),
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("api_base_url must not be blank")
        return cleaned

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if self.api_base_url == DEFAULT_API_BASE_URL:
            warnings.append(
                "POKEDEX_API_BASE_URL is not set - using the local service at "
                f"{DEFAULT_API_BASE_URL}"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_DETAIL_CACHE_TTL_SECONDS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "get_settings",
]
