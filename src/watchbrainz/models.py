"""Domain records shared by the registry, ledger, sync engine and feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from watchbrainz.core.dates import is_unset_date


@dataclass(frozen=True, slots=True)
class Entity:
    """A tracked artist as stored in the registry."""

    entity_id: str
    display_name: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """A release group as stored in the ledger.

    ``recorded_at`` is unix seconds of local discovery; ``0`` marks records
    seeded when the artist was first added.
    """

    release_id: str
    entity_id: str
    title: str
    kind: str
    release_date: date
    recorded_at: int

    @property
    def is_seeded(self) -> bool:
        return self.recorded_at == 0

    @property
    def has_known_date(self) -> bool:
        return not is_unset_date(self.release_date)


@dataclass(frozen=True, slots=True)
class FeedItem:
    """One ledger row joined with its artist, as read by the feed query."""

    entity_id: str
    display_name: str
    record: ReleaseRecord


@dataclass(slots=True)
class SyncOutcome:
    """What one ``sync_entity`` call did."""

    entity_id: str
    display_name: str | None = None
    attempts: int = 0
    fetched: int = 0
    inserted: list[str] = field(default_factory=list)
    failed: bool = False
    error: Exception | None = None

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)
