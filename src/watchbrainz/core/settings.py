"""Settings for watchbrainz.

Tunables for the sync engine, feed renderer and catalog client, read from
``WATCHBRAINZ_*`` environment variables and an optional ``.env`` file.

The feed file and feed URL are *not* here: they are operator state stored
in the database (see :mod:`watchbrainz.config`) so that a cron line only
needs to name the database.

Fields
──────
database           : SQLite database path
log_level          : structlog level (``--quiet`` forces WARNING)
log_format         : ``console`` or ``json``
feed_size          : Maximum number of items in the feed
max_age_days       : Skip release groups released longer ago than this
max_attempts       : Fetch attempts per artist before giving up
request_delay_sec  : Blocking pause after every catalog request
page_size          : Release groups requested per page
api_base_url       : MusicBrainz web service root
site_url           : MusicBrainz website root used for feed links
http_timeout       : Per-request timeout in seconds
app_name / app_version / contact : User-Agent identification

Examples:
    >>> from watchbrainz.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.feed_size
    20
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WatchbrainzSettings(BaseSettings):
    """watchbrainz configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WATCHBRAINZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database: Path = Field(
        default_factory=lambda: Path.home() / ".watchbrainz" / "watchbrainz.db",
        description="SQLite database file",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # ── Feed ─────────────────────────────────────────────────────
    feed_size: int = Field(default=20, ge=1)
    max_age_days: int = Field(default=5 * 365, ge=0)

    # ── Sync ─────────────────────────────────────────────────────
    max_attempts: int = Field(default=3, ge=1)
    # https://musicbrainz.org/doc/MusicBrainz_API/Rate_Limiting
    request_delay_sec: float = Field(default=1.0, ge=0)
    page_size: int = Field(default=100, ge=1, le=100)

    # ── Catalog ──────────────────────────────────────────────────
    api_base_url: str = Field(default="https://musicbrainz.org/ws/2")
    site_url: str = Field(default="https://musicbrainz.org")
    http_timeout: float = Field(default=30.0, gt=0)
    app_name: str = Field(default="watchbrainz")
    app_version: str = Field(default="0.1")
    contact: str = Field(default="https://github.com/derat/watchbrainz")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {v!r}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in ("console", "json"):
            raise ValueError(f"Invalid log format: {v!r}")
        return fmt

    @property
    def user_agent(self) -> str:
        """Client identification string required by the MusicBrainz usage policy."""
        return f"{self.app_name}/{self.app_version} ( {self.contact} )"


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: WatchbrainzSettings | None = None


def get_settings(*, _force_reload: bool = False) -> WatchbrainzSettings:
    """Load, validate, and cache a :class:`WatchbrainzSettings` instance."""
    global _settings_cache
    if _settings_cache is None or _force_reload:
        _settings_cache = WatchbrainzSettings()
    return _settings_cache


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    global _settings_cache
    _settings_cache = None
