"""Tests for FeedRenderer."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from datetime import UTC, date, datetime

import pytest

from watchbrainz.core.dates import UNSET_DATE
from watchbrainz.core.errors import FeedWriteError
from watchbrainz.feed import EMPTY_TITLE, FeedRenderer, calendar_url, cdata
from watchbrainz.models import ReleaseRecord

FEED_URL = "https://example.org/music.rdf"
TODAY = date(2024, 6, 1)
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)

NS = {
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rss": "http://purl.org/rss/1.0/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "content": "http://purl.org/rss/1.0/modules/content/",
}


@pytest.fixture
def renderer(ledger) -> FeedRenderer:
    return FeedRenderer(
        ledger,
        site_url="https://musicbrainz.org",
        feed_size=20,
        max_age_days=5 * 365,
        today=lambda: TODAY,
        now=lambda: NOW,
    )


def add_release(ledger, rg_id, *, artist_id="a1", title="Title", released=date(2024, 1, 1), recorded_at=100, kind="Album"):
    ledger.insert(
        ReleaseRecord(
            release_id=rg_id,
            entity_id=artist_id,
            title=title,
            kind=kind,
            release_date=released,
            recorded_at=recorded_at,
        )
    )


def parse(document: str) -> ET.Element:
    return ET.fromstring(document.encode("utf-8"))


class TestEntries:
    def test_empty_feed_has_placeholder(self, renderer):
        entries = renderer.entries(FEED_URL)
        assert len(entries) == 1
        assert entries[0].title == EMPTY_TITLE
        assert entries[0].id == FEED_URL
        assert entries[0].link == FEED_URL
        assert entries[0].updated == "2024-06-01T12:00:00Z"

    def test_ordering_and_bound(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        for i in range(25):
            add_release(ledger, f"rg{i:02d}", recorded_at=1_000 + i)
        entries = renderer.entries(FEED_URL)
        assert len(entries) == 20
        assert [e.id for e in entries] == [f"rg{i:02d}" for i in range(24, 4, -1)]

    def test_age_filter(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "ancient", released=date(2010, 1, 1), recorded_at=900)
        add_release(ledger, "recent", released=date(2023, 1, 1), recorded_at=100)
        assert [e.id for e in renderer.entries(FEED_URL)] == ["recent"]

    def test_inactive_artists_are_hidden(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        registry.set_active("a1", False)
        add_release(ledger, "rg1")
        assert renderer.entries(FEED_URL)[0].title == EMPTY_TITLE

    def test_item_fields(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "rg1", title="Tender Buttons", released=date(2024, 1, 1), recorded_at=1_700_000_000)
        entry = renderer.entries(FEED_URL)[0]
        assert entry.id == "rg1"
        assert entry.title == "2024-01-01: Broadcast - Tender Buttons"
        assert entry.link == "https://musicbrainz.org/release-group/rg1"
        assert entry.updated == "2023-11-14T22:13:20Z"
        assert '<a href="https://musicbrainz.org/artist/a1">Broadcast</a>' in entry.content
        assert "<b>Type:</b> Album" in entry.content
        assert "Add to Google Calendar" not in entry.content

    def test_unknown_date(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "rg1", title="Next One", released=UNSET_DATE)
        entry = renderer.entries(FEED_URL)[0]
        assert entry.title == "Unknown: Broadcast - Next One"
        assert "<b>Release date:</b> Unknown" in entry.content
        assert "calendar" not in entry.content

    def test_upcoming_release_gets_calendar_link(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "rg1", title="Soon", released=date(2024, 7, 4))
        entry = renderer.entries(FEED_URL)[0]
        assert "Add to Google Calendar" in entry.content
        assert "dates=20240704/20240705" in entry.content
        assert 'target="_blank"' in entry.content

    def test_release_today_gets_calendar_link(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "rg1", released=TODAY)
        assert "Add to Google Calendar" in renderer.entries(FEED_URL)[0].content

    def test_html_is_escaped(self, renderer, registry, ledger):
        registry.add("a1", "Simon & Garfunkel")
        add_release(ledger, "rg1", title="<Live>")
        content = renderer.entries(FEED_URL)[0].content
        assert "Simon &amp; Garfunkel" in content
        assert "&lt;Live&gt;" in content


class TestDocument:
    def test_channel(self, renderer):
        root = parse(renderer.render(FEED_URL))
        channel = root.find("rss:channel", NS)
        assert channel.get(f"{{{NS['rdf']}}}about") == FEED_URL
        assert channel.findtext("rss:title", namespaces=NS) == "New Music Releases"
        assert channel.findtext("rss:description", namespaces=NS) == "Release groups recently added to MusicBrainz"
        assert channel.findtext("dc:date", namespaces=NS) == "2024-06-01T12:00:00Z"

    def test_items_are_well_formed(self, renderer, registry, ledger):
        registry.add("a1", "Broadcast")
        add_release(ledger, "rg1", title="A ]]> B", recorded_at=2)
        add_release(ledger, "rg2", title="Haha & Sound", recorded_at=1)
        root = parse(renderer.render(FEED_URL))

        items = root.findall("rss:item", NS)
        assert [i.findtext("dc:identifier", namespaces=NS) for i in items] == ["rg1", "rg2"]
        assert items[0].findtext("rss:title", namespaces=NS) == "2024-01-01: Broadcast - A ]]> B"
        content = items[0].findtext("content:encoded", namespaces=NS)
        assert "A ]]&gt; B" in content

        seq = root.find("rss:channel/rss:items/rdf:Seq", NS)
        resources = [li.get(f"{{{NS['rdf']}}}resource") for li in seq]
        assert resources == [
            "https://musicbrainz.org/release-group/rg1",
            "https://musicbrainz.org/release-group/rg2",
        ]

    def test_placeholder_document(self, renderer):
        root = parse(renderer.render(FEED_URL))
        items = root.findall("rss:item", NS)
        assert len(items) == 1
        assert items[0].findtext("rss:title", namespaces=NS) == EMPTY_TITLE
        assert items[0].find("content:encoded", NS) is None


class TestWrite:
    def test_write_replaces_file(self, renderer, tmp_path):
        target = tmp_path / "music.rdf"
        target.write_text("old")
        written = renderer.write(target, FEED_URL)
        assert written == target
        assert "New Music Releases" in target.read_text()
        assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []
        assert os.stat(target).st_mode & 0o777 == 0o644

    def test_missing_directory_raises_feed_write_error(self, renderer, tmp_path):
        target = tmp_path / "missing" / "music.rdf"
        with pytest.raises(FeedWriteError) as exc_info:
            renderer.write(target, FEED_URL)
        assert exc_info.value.path == str(target)
        assert isinstance(exc_info.value.cause, OSError)


class TestHelpers:
    def test_cdata_splits_terminator(self):
        assert str(cdata("a]]>b")) == "<![CDATA[a]]]]><![CDATA[>b]]>"

    def test_calendar_url(self):
        url = calendar_url("Broadcast - Tender Buttons", date(2024, 12, 31), "https://musicbrainz.org/release-group/x")
        assert url.startswith("http://www.google.com/calendar/event?action=TEMPLATE")
        assert "text=Broadcast%20-%20Tender%20Buttons" in url
        assert "dates=20241231/20250101" in url
        assert "details=https%3A%2F%2Fmusicbrainz.org%2Frelease-group%2Fx" in url
        assert url.endswith("&location=&trp=false&sprop=&sprop=name:")
