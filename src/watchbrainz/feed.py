"""
Feed renderer - RSS 1.0 document of recently discovered releases.

Manifesto:
    The feed answers one question: "what did watchbrainz notice lately?"
    Items are therefore ordered by when a release was *recorded*, not by
    when it was released. Back catalog seeded at add time has
    ``recorded_at = 0`` and sinks to the bottom; the age horizon drops
    anything released too long ago to be news.

Architecture:
    ::

        ReleaseLedger.recent_for_feed(today - max_age_days, feed_size)
                │
                ▼
        FeedEntry (title, link, updated, content)
                │   item.html  → description block
                ▼
        feed.xml  → RSS 1.0 / RDF document
                │
                ▼
        write(): temp file in the target directory, then os.replace()

    Templates handle formatting; this module handles the query and the
    per-item values.

Tags:
    feed, rss, jinja2, renderer
"""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from watchbrainz.core.dates import format_date, from_unix, to_rfc3339
from watchbrainz.core.errors import FeedWriteError
from watchbrainz.core.logging import get_logger
from watchbrainz.ledger import ReleaseLedger
from watchbrainz.models import FeedItem

FEED_TITLE = "New Music Releases"
FEED_DESCRIPTION = "Release groups recently added to MusicBrainz"
EMPTY_TITLE = "No releases yet"
UNKNOWN_DATE = "Unknown"

DEFAULT_SITE_URL = "https://musicbrainz.org"
DEFAULT_FEED_SIZE = 20
DEFAULT_MAX_AGE_DAYS = 5 * 365

CALENDAR_URL = "http://www.google.com/calendar/event"


def cdata(text: str) -> Markup:
    """Wrap *text* in a CDATA section, splitting any ``]]>`` it contains."""
    return Markup("<![CDATA[" + str(text).replace("]]>", "]]]]><![CDATA[>") + "]]>")


def calendar_url(text: str, day: date, details: str) -> str:
    """Google Calendar "add event" link for an all-day event on *day*."""
    start = day.strftime("%Y%m%d")
    end = (day + timedelta(days=1)).strftime("%Y%m%d")
    return (
        f"{CALENDAR_URL}?action=TEMPLATE"
        f"&text={quote(text, safe='')}"
        f"&dates={start}/{end}"
        f"&details={quote(details, safe='')}"
        "&location=&trp=false&sprop=&sprop=name:"
    )


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """One rendered feed item."""

    id: str
    title: str
    link: str
    updated: str
    content: str = ""


class FeedRenderer:
    """
    Build and write the feed.

    Args:
        ledger: Release ledger to query
        site_url: MusicBrainz website root for item links
        feed_size: Maximum number of items
        max_age_days: Releases older than this are left out
        today: Returns the current local date
        now: Returns the current time (timezone-aware)
        template_dir: Override the packaged templates
        logger: Optional structlog logger
    """

    document_template = "feed.xml"
    item_template = "item.html"

    def __init__(
        self,
        ledger: ReleaseLedger,
        *,
        site_url: str = DEFAULT_SITE_URL,
        feed_size: int = DEFAULT_FEED_SIZE,
        max_age_days: int = DEFAULT_MAX_AGE_DAYS,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
        template_dir: Path | None = None,
        logger: Any = None,
    ):
        self.ledger = ledger
        self.site_url = site_url.rstrip("/")
        self.feed_size = feed_size
        self.max_age_days = max_age_days
        self.today = today
        self.now = now
        self._log = logger or get_logger(__name__)

        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["cdata"] = cdata

    # -- links -------------------------------------------------------------

    def release_group_url(self, release_id: str) -> str:
        return f"{self.site_url}/release-group/{release_id}"

    def artist_url(self, entity_id: str) -> str:
        return f"{self.site_url}/artist/{entity_id}"

    # -- entries -----------------------------------------------------------

    def entries(self, feed_url: str) -> list[FeedEntry]:
        """Feed entries, newest-recorded first; a placeholder when empty."""
        today = self.today()
        rows = self.ledger.recent_for_feed(
            min_release_date=today - timedelta(days=self.max_age_days),
            limit=self.feed_size,
        )
        if not rows:
            return [
                FeedEntry(
                    id=feed_url,
                    title=EMPTY_TITLE,
                    link=feed_url,
                    updated=to_rfc3339(self.now()),
                )
            ]
        return [self._entry(row, today) for row in rows]

    def _entry(self, item: FeedItem, today: date) -> FeedEntry:
        record = item.record
        known_date = record.has_known_date
        date_str = format_date(record.release_date) if known_date else UNKNOWN_DATE
        link = self.release_group_url(record.release_id)

        cal = None
        if known_date and record.release_date >= today:
            cal = calendar_url(f"{item.display_name} - {record.title}", record.release_date, link)

        content = self.env.get_template(self.item_template).render(
            artist=item.display_name,
            artist_url=self.artist_url(item.entity_id),
            title=record.title,
            link=link,
            kind=record.kind,
            date=date_str,
            added=time.ctime(record.recorded_at),
            calendar_url=cal,
        )
        return FeedEntry(
            id=record.release_id,
            title=f"{date_str}: {item.display_name} - {record.title}",
            link=link,
            updated=to_rfc3339(from_unix(record.recorded_at)),
            content=content,
        )

    # -- output ------------------------------------------------------------

    def render(self, feed_url: str) -> str:
        """Render the complete feed document."""
        entries = self.entries(feed_url)
        return self.env.get_template(self.document_template).render(
            feed_url=feed_url,
            title=FEED_TITLE,
            description=FEED_DESCRIPTION,
            updated=to_rfc3339(self.now()),
            entries=entries,
        )

    def write(self, feed_file: str | Path, feed_url: str) -> Path:
        """Render and atomically replace *feed_file*.

        Returns:
            The path written
        """
        target = Path(feed_file)
        document = self.render(feed_url)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
        except OSError as e:
            raise FeedWriteError(str(target), e) from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document)
            # mkstemp creates 0600; the feed is served by a web server.
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise FeedWriteError(str(target), e) from e
        self._log.info("feed_written", feed_file=str(target), bytes=len(document.encode("utf-8")))
        return target
