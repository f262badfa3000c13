"""
Centralized settings for recordkit.

:class:`RecordKitSettings` is a pydantic-settings model read from
``RECORDKIT_*`` environment variables and an optional ``.env`` file.
:func:`get_settings` validates and caches one instance per process.

    RECORDKIT_DATABASE_URL=sqlite:///data/birthdays.db
    RECORDKIT_DATABASE_ECHO=true
    RECORDKIT_LOG_LEVEL=DEBUG
    RECORDKIT_LOG_FORMAT=console

Tags:
    recordkit, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recordkit.errors import ConfigError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LOG_FORMATS = {"json", "console"}


class RecordKitSettings(BaseSettings):
    """recordkit configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///recordkit.db")
    database_echo: bool = Field(default=False)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(_LOG_FORMATS)}")
        return value


_settings_cache: dict[str, RecordKitSettings] = {}


def get_settings(*, _force_reload: bool = False) -> RecordKitSettings:
    """Load, validate, and cache a :class:`RecordKitSettings` instance.

    Raises:
        ConfigError: the environment holds invalid values.
    """
    if _force_reload or "default" not in _settings_cache:
        try:
            _settings_cache["default"] = RecordKitSettings()
        except ValidationError as exc:
            raise ConfigError(f"Invalid recordkit settings: {exc}", cause=exc) from exc
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Forget the cached settings (tests, reconfiguration)."""
    _settings_cache.clear()


__all__ = ["RecordKitSettings", "get_settings", "clear_settings_cache"]
