"""
Centralized settings for the symbol catalog.

Manifesto:
    The heuristics the catalog applies to source data (which suffix marks a
    migration variant, which phrases count as a deprecation notice) are
    conventions observed in the symbol sets, not a declared grammar. They
    live in one validated settings object so that tooling can tune them
    without code changes.

All fields can be set via ``SYMCAT_*`` environment variables (e.g.
``SYMCAT_DEFAULT_LOCALE=es``) or a ``.env`` file.

Tags:
    configuration, settings, pydantic, symbol-catalog

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MIGRATION_NOTICE_PATTERNS = [
    r"\bfor migration\b",
    r"\bmigration from\b",
    r"\bnot (?:to )?be used (?:in|for) new maps\b",
    r"\bshould not be used\b",
    r"\bdeprecated\b",
    r"\bdiscouraged\b",
]


class CatalogSettings(BaseSettings):
    """Symbol catalog configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SYMCAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="auto", description="json, console or auto")

    # ── Localization ─────────────────────────────────────────────
    default_locale: str = Field(default="en", description="Locale assumed when a .ts file declares none")
    coverage_threshold: float = Field(default=1.0, ge=0.0, le=1.0)

    # ── Identifier heuristics ────────────────────────────────────
    migration_suffix: int = Field(default=9, ge=0)
    migration_notice_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MIGRATION_NOTICE_PATTERNS)
    )
    strict_migration_notice: bool = Field(
        default=True,
        description="Report migration-suffixed symbols without a notice as errors instead of warnings",
    )

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in {"json", "console", "auto"}:
            raise ValueError(f"log_format must be json, console or auto, not {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return value


_settings_cache: dict[str, CatalogSettings] = {}


def get_settings(*, _force_reload: bool = False) -> CatalogSettings:
    """Load, validate, and cache a :class:`CatalogSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = CatalogSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
