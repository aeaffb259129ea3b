"""Process-level configuration using pydantic-settings.

Environment variables use the ``ANNOTEXT_`` prefix and a double-underscore
delimiter for nesting: ``ANNOTEXT_FILTERS__MAX_TEXT_LENGTH``,
``ANNOTEXT_LOGGING__LEVEL``.  Consumers call ``get_settings()`` to obtain a
cached, validated instance.  Tests construct ``Settings(_env_file=None, ...)``
directly for isolation.

Per-run filter options (builders, validators, link attributes) are not
settings; they travel in the filter context (``annotext.filters.context``).
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/annotext/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class FiltersConfig(BaseModel):
    """Limits applied at the filter boundary."""

    # Text nodes longer than this are left untouched.
    max_text_length: int = 100_000


class LoggingConfig(BaseModel):
    """Console logging used by the CLI."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"unknown log level: {value!r}"
            raise ValueError(msg)
        return level


class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation."""

    model_config = SettingsConfigDict(
        env_prefix="ANNOTEXT_",
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    filters: FiltersConfig = FiltersConfig()
    logging: LoggingConfig = LoggingConfig()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()
    logger.debug(
        "Settings: max_text_length=%d, log level=%s",
        settings.filters.max_text_length,
        settings.logging.level,
    )
    return settings
