"""
Shared pytest fixtures for watchbrainz tests.

This module provides:
- An in-memory database with the schema applied
- Registry, ledger and feed-config stores on that database
- ``FakeCatalog``: an in-memory stand-in for the MusicBrainz client
- A throttle that records pauses instead of sleeping
- A sync engine wired from the above with a fixed clock

Usage:
    def test_something(engine, catalog, ledger):
        catalog.add_artist("a1", "Broadcast")
        catalog.set_release_groups("a1", 3)
        engine.sync_entity("a1", is_new_entity=False)
        assert ledger.count() == 3
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Generator

import pytest

# Ensure watchbrainz is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from watchbrainz.catalog.models import CatalogArtist, CatalogArtistMatch, CatalogReleaseGroup
from watchbrainz.config import FeedConfigStore
from watchbrainz.core.database import open_database
from watchbrainz.core.errors import EntityNotFoundError
from watchbrainz.core.logging import configure_logging
from watchbrainz.core.result import Err, Ok, Result
from watchbrainz.core.settings import clear_settings_cache
from watchbrainz.execution.retry import ConstantBackoff
from watchbrainz.execution.throttle import RequestThrottle
from watchbrainz.ledger import ReleaseLedger
from watchbrainz.registry import EntityRegistry
from watchbrainz.sync import SyncEngine

# 2023-11-14T22:13:20Z
FIXED_NOW = 1_700_000_000


# =============================================================================
# Builders
# =============================================================================


def make_release_group(
    rg_id: str,
    title: str = "Title",
    date: str | None = "2020-01-01",
    kind: str | None = "Album",
    disambiguation: str = "",
) -> CatalogReleaseGroup:
    return CatalogReleaseGroup.model_validate(
        {
            "id": rg_id,
            "title": title,
            "first-release-date": date,
            "primary-type": kind,
            "disambiguation": disambiguation,
        }
    )


def make_artist(
    artist_id: str,
    name: str,
    type: str | None = "Group",
    country: str | None = "GB",
    begin: str | None = "1989",
    end: str | None = None,
) -> CatalogArtist:
    return CatalogArtist.model_validate(
        {
            "id": artist_id,
            "name": name,
            "type": type,
            "country": country,
            "life-span": {"begin": begin, "end": end},
        }
    )


class FakeCatalog:
    """In-memory catalog honouring the ``CatalogClient`` contract.

    ``fail_next(artist_id, *errors)`` queues errors returned by successive
    ``list_subrecords`` calls for that artist before normal pages resume.
    """

    def __init__(self) -> None:
        self.artists: dict[str, CatalogArtist] = {}
        self.search_results: dict[str, list[CatalogArtistMatch]] = {}
        self.release_groups: dict[str, list[CatalogReleaseGroup]] = {}
        self.queued_errors: dict[str, list[Exception]] = {}
        self.calls: list[tuple[Any, ...]] = []

    # -- setup -------------------------------------------------------------

    def add_artist(self, artist_id: str, name: str, *, searchable: bool = True, **kwargs: Any) -> CatalogArtist:
        artist = make_artist(artist_id, name, **kwargs)
        self.artists[artist_id] = artist
        if searchable:
            self.search_results.setdefault(name, []).append(
                CatalogArtistMatch(id=artist_id, name=name, score=100)
            )
        return artist

    def set_release_groups(self, artist_id: str, groups: int | list[CatalogReleaseGroup]) -> None:
        if isinstance(groups, int):
            groups = [make_release_group(f"{artist_id}-rg-{i:04d}", title=f"Album {i}") for i in range(groups)]
        self.release_groups[artist_id] = list(groups)

    def fail_next(self, artist_id: str, *errors: Exception) -> None:
        self.queued_errors.setdefault(artist_id, []).extend(errors)

    # -- CatalogClient -----------------------------------------------------

    def search(self, name: str) -> Result[list[CatalogArtistMatch]]:
        self.calls.append(("search", name))
        return Ok(list(self.search_results.get(name, [])))

    def lookup(self, artist_id: str) -> Result[CatalogArtist]:
        self.calls.append(("lookup", artist_id))
        if artist_id in self.artists:
            return Ok(self.artists[artist_id])
        return Err(EntityNotFoundError(f"Not found: {artist_id}"))

    def list_subrecords(self, artist_id: str, limit: int, offset: int) -> Result[list[CatalogReleaseGroup]]:
        self.calls.append(("list_subrecords", artist_id, offset))
        queued = self.queued_errors.get(artist_id)
        if queued:
            return Err(queued.pop(0))
        groups = self.release_groups.get(artist_id, [])
        return Ok(groups[offset : offset + limit])

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    def __enter__(self) -> FakeCatalog:
        return self

    def __exit__(self, *args: Any) -> None:
        pass


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep tests away from the real ``~/.watchbrainz`` and any ``.env``."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("WATCHBRAINZ_DATABASE", str(tmp_path / "default.db"))
    monkeypatch.setenv("WATCHBRAINZ_REQUEST_DELAY_SEC", "0")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def fresh_logging() -> None:
    """Point structlog at the current stderr (CliRunner swaps it per invoke)."""
    configure_logging(level="DEBUG")


@pytest.fixture
def conn():
    """In-memory database with the schema applied."""
    connection = open_database(":memory:", create=True)
    yield connection
    connection.close()


@pytest.fixture
def registry(conn) -> EntityRegistry:
    return EntityRegistry(conn)


@pytest.fixture
def ledger(conn) -> ReleaseLedger:
    return ReleaseLedger(conn)


@pytest.fixture
def feed_config(conn) -> FeedConfigStore:
    return FeedConfigStore(conn)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def throttle(sleeps) -> RequestThrottle:
    """Throttle that records sleeps instead of blocking."""
    return RequestThrottle(delay=1.0, sleep=sleeps.append)


@pytest.fixture
def engine(catalog, registry, ledger, throttle) -> SyncEngine:
    return SyncEngine(
        catalog,
        registry,
        ledger,
        throttle=throttle,
        strategy=ConstantBackoff(max_attempts=3),
        page_size=100,
        clock=lambda: FIXED_NOW,
    )
