"""
Artist lifecycle: add, reactivate, deactivate.

    absent ──add──▶ active ◀──add── inactive
                      │                ▲
                      └────remove──────┘

Adding an unknown artist resolves it against the catalog, stores it and
immediately seeds the ledger with its back catalog (``recorded_at = 0``).
If that seeding fails the artist is dropped again so a later run cannot
mistake its back catalog for new releases. Reactivation does not re-sync;
the next scheduled run picks up anything released meanwhile, with a real
timestamp.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from watchbrainz.catalog.models import CatalogArtist
from watchbrainz.core.dates import year_or_present
from watchbrainz.core.logging import get_logger
from watchbrainz.core.result import Err, Ok
from watchbrainz.registry import EntityRegistry
from watchbrainz.sync import SyncEngine


class AddOutcome(str, Enum):
    ADDED = "added"
    REACTIVATED = "reactivated"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    SEED_FAILED = "seed_failed"


def describe_artist(artist: CatalogArtist) -> str:
    """``"Group from GB 1989-present"`` style summary for the add log."""
    kind = artist.type or "Artist"
    country = artist.country or "unknown country"
    begin = year_or_present(artist.date_begin)
    end = year_or_present(artist.date_end)
    return f"{kind} from {country} {begin}-{end}"


class LifecycleManager:
    """Operator-facing add/remove over the registry and sync engine."""

    def __init__(self, registry: EntityRegistry, engine: SyncEngine, logger: Any = None):
        self.registry = registry
        self.engine = engine
        self._log = logger or get_logger(__name__)

    def add(self, name_or_id: str) -> AddOutcome:
        """Start tracking *name_or_id* (a display name or an MBID)."""
        log = self._log.bind(artist=name_or_id)

        existing = self.registry.find(name_or_id)
        if existing is not None:
            if existing.active:
                log.info("artist_already_active", artist_id=existing.entity_id)
                return AddOutcome.UNCHANGED
            self.registry.set_active(existing.entity_id, True)
            log.info("artist_reactivated", artist_id=existing.entity_id)
            return AddOutcome.REACTIVATED

        match self.engine.resolve_identity(name_or_id):
            case Err(error):
                log.warning("artist_not_found", error=str(error))
                return AddOutcome.NOT_FOUND
            case Ok(artist):
                pass

        # The search may resolve to an artist that is already stored under
        # a different spelling.
        stored = self.registry.find(artist.id)
        if stored is not None:
            if not stored.active:
                self.registry.set_active(stored.entity_id, True)
                log.info("artist_reactivated", artist_id=stored.entity_id, stored_name=stored.display_name)
                return AddOutcome.REACTIVATED
            log.info("artist_already_active", artist_id=stored.entity_id, stored_name=stored.display_name)
            return AddOutcome.UNCHANGED

        entity = self.registry.add(artist.id, artist.name)
        log.info(
            "artist_inserted",
            name=entity.display_name,
            artist_id=entity.entity_id,
            summary=describe_artist(artist),
        )
        outcome = self.engine.sync_entity(entity.entity_id, is_new_entity=True, display_name=entity.display_name)
        if outcome.failed:
            # Stored artists always have a seeded back catalog
            self.registry.delete(entity.entity_id)
            log.warning("artist_seed_failed", artist_id=entity.entity_id, error=str(outcome.error))
            return AddOutcome.SEED_FAILED
        return AddOutcome.ADDED

    def remove(self, name_or_id: str) -> bool:
        """Stop tracking; history stays in the ledger.

        Returns:
            False when no stored artist matches
        """
        entity = self.registry.find(name_or_id)
        if entity is None:
            self._log.warning("artist_not_present", artist=name_or_id)
            return False
        self.registry.set_active(entity.entity_id, False)
        self._log.info("artist_removed", artist=entity.display_name, artist_id=entity.entity_id)
        return True
