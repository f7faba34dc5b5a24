"""Persisted feed configuration - the single-row ``Config`` table."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from watchbrainz.core.errors import MissingConfigError
from watchbrainz.core.logging import get_logger
from watchbrainz.core.schema import TABLES

CONFIG = TABLES["config"]


@dataclass(frozen=True, slots=True)
class FeedConfig:
    feed_file: str
    feed_url: str


class FeedConfigStore:
    """Where the feed is written and the URL it is published under."""

    def __init__(self, conn: Any, logger: Any = None):
        self.conn = conn
        self._log = logger or get_logger(__name__)

    def read(self) -> FeedConfig:
        self.conn.execute(f"SELECT FeedFile, FeedUrl FROM {CONFIG} LIMIT 1")
        row = self.conn.fetchone()
        if row is None:
            return FeedConfig(feed_file="", feed_url="")
        return FeedConfig(feed_file=row[0], feed_url=row[1])

    def set_file(self, path: str | Path) -> str:
        """Store the feed path, made absolute against the current directory."""
        absolute = str(Path(path).expanduser().absolute())
        self.conn.execute(f"UPDATE {CONFIG} SET FeedFile = ?", (absolute,))
        self.conn.commit()
        self._log.info("feed_file_set", feed_file=absolute)
        return absolute

    def set_url(self, url: str) -> None:
        self.conn.execute(f"UPDATE {CONFIG} SET FeedUrl = ?", (url,))
        self.conn.commit()
        self._log.info("feed_url_set", feed_url=url)

    def require(self) -> FeedConfig:
        """Return the config, raising if either value is unset.

        Raises:
            MissingConfigError: feed file or feed URL is empty
        """
        config = self.read()
        if not config.feed_file:
            raise MissingConfigError("feed_file", "Feed file not set; use set-file")
        if not config.feed_url:
            raise MissingConfigError("feed_url", "Feed URL not set; use set-url")
        return config
