"""Rentease application settings loaded from environment and ``.env`` files.

Uses :mod:`pydantic_settings` to parse environment variables (and optionally
an ``.env`` file) into a validated settings object.  The field name is the
lowercase version of the env-var name (e.g. ``SESSION_DURATION_MINUTES`` →
``session_duration_minutes``).

Typical usage::

    from rentease.core.settings import Settings

    settings = Settings()
    conn = await open_db(settings.database_path_resolved)
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rentease.core.exceptions import ConfigError

__all__ = ["Settings", "load_settings"]

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Central application configuration.

    Values are loaded in priority order:

    1. Actual environment variables (highest priority).
    2. ``.env`` file in the working directory.
    3. Field defaults (lowest priority).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    database_path: str = Field(
        default="data/rentease.db",
        description="Path to the SQLite file holding local and session storage.",
    )
    cities_path: str = Field(
        default="data/bc-cities.json",
        description="JSON array of city names offered on the new-flat form.",
    )

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    session_duration_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes a login stays valid.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = Field(default="INFO", description="Logging level.")
    log_format: str = Field(default="text", description="Log format: 'text' or 'json'.")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got {v!r}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, v: str) -> str:
        allowed = {"text", "json"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v_lower

    # ------------------------------------------------------------------
    # Derived helpers
    # ------------------------------------------------------------------

    @property
    def session_duration_ms(self) -> int:
        """Session window in milliseconds (login timestamps are epoch ms)."""
        return self.session_duration_minutes * 60 * 1000

    @property
    def database_path_resolved(self) -> Path:
        """Return the database path as a resolved :class:`~pathlib.Path`."""
        return Path(self.database_path).resolve()

    @property
    def cities_path_resolved(self) -> Path:
        return Path(self.cities_path).resolve()


def load_settings() -> Settings:
    """Build :class:`Settings`, turning validation failures into :class:`ConfigError`."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
