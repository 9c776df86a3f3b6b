"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/phrasemark/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_TAG_NAME = re.compile(r"[a-z][a-z0-9-]*")

_LOG_LEVELS = frozenset(("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class HighlightConfig(BaseModel):
    """Marker element and traversal settings."""

    marker_tag: str = "mark"
    opaque_tags: tuple[str, ...] = ("script",)

    @field_validator("marker_tag")
    @classmethod
    def marker_tag_is_tag_name(cls, value: str) -> str:
        value = value.strip().lower()
        if not _TAG_NAME.fullmatch(value):
            msg = f"HIGHLIGHT__MARKER_TAG must be an HTML tag name, got {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("opaque_tags")
    @classmethod
    def lowercase_opaque_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(tag.strip().lower() for tag in value if tag.strip())


class LogConfig(BaseModel):
    """Logging configuration for the command-line entry point."""

    level: str = "INFO"
    log_dir: Path = Path("logs")
    file_logging: bool = False

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            msg = f"LOG__LEVEL must be one of {sorted(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return value


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``HIGHLIGHT__MARKER_TAG``, ``LOG__LEVEL``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    highlight: HighlightConfig = HighlightConfig()
    log: LogConfig = LogConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.debug("Settings: no .env file found, using env vars and defaults")

    return settings
