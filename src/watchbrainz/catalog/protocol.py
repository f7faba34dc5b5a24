"""
Remote catalog contract.

The sync engine depends on this shape, not on :class:`MusicBrainzClient`,
so tests drive it with in-memory fakes.

    ┌──────────────────────────────────────────────────────────────────┐
    │ search(name)                        → Result[list[ArtistMatch]]  │
    │ lookup(artist_id)                   → Result[CatalogArtist]      │
    │ list_subrecords(id, limit, offset)  → Result[list[ReleaseGroup]] │
    └──────────────────────────────────────────────────────────────────┘

Implementations never raise for remote failures: they return ``Err`` with
a :class:`~watchbrainz.core.errors.WatchbrainzError` whose ``retryable``
flag tells the caller whether trying again makes sense. They do not
throttle either; pacing is the caller's job.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from watchbrainz.catalog.models import CatalogArtist, CatalogArtistMatch, CatalogReleaseGroup
from watchbrainz.core.result import Result


@runtime_checkable
class CatalogClient(Protocol):
    """Read-only access to the remote catalog."""

    def search(self, name: str) -> Result[list[CatalogArtistMatch]]:
        """Best-effort artist search by name, best match first."""
        ...

    def lookup(self, artist_id: str) -> Result[CatalogArtist]:
        """Fetch one artist by id; ``Err(EntityNotFoundError)`` if unknown."""
        ...

    def list_subrecords(
        self, artist_id: str, limit: int, offset: int
    ) -> Result[list[CatalogReleaseGroup]]:
        """One page of the artist's release groups (empty list past the end)."""
        ...
