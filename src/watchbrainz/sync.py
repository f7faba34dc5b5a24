"""
Sync engine - discover new release groups and record each exactly once.

Manifesto:
    The catalog is slow, rate limited and occasionally wrong. The ledger is
    the only thing that must never be wrong. So every remote call is paced
    by the throttle and may fail, every failure is a value (``Err``) that
    the bounded retry can inspect, and nothing is written until a complete,
    validated listing has been fetched. A failed artist is skipped for this
    run; the next scheduled run simply tries again.

Architecture:
    ::

        sync_all_active_entities()
            │  registry.list_active()        (read everything first)
            ▼
        sync_entity(id, is_new_entity)
            │  RetryContext.run(fetch_all_subrecords)
            │      ├─ list_subrecords(offset=0)    → throttle.pause()
            │      ├─ list_subrecords(offset=100)  → throttle.pause()
            │      └─ ... until an empty page
            ▼
        ledger.known_ids()  →  insert unseen ids
            recorded_at = 0      when seeding a newly added artist
            recorded_at = now    otherwise

    Remote errors are recovered (retried, then logged and skipped).
    ``DatabaseError`` is never caught here; a failed write ends the run.

Tags:
    sync, pagination, retry, dedup, musicbrainz
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from watchbrainz.catalog.models import CatalogArtist, CatalogReleaseGroup
from watchbrainz.catalog.protocol import CatalogClient
from watchbrainz.core.errors import EntityNotFoundError
from watchbrainz.core.logging import get_logger
from watchbrainz.core.result import Err, Ok, Result
from watchbrainz.execution.retry import ConstantBackoff, RetryContext, RetryStrategy
from watchbrainz.execution.throttle import RequestThrottle
from watchbrainz.ledger import ReleaseLedger
from watchbrainz.models import ReleaseRecord, SyncOutcome
from watchbrainz.registry import EntityRegistry

DEFAULT_PAGE_SIZE = 100


class SyncEngine:
    """
    Incremental discovery of release groups for tracked artists.

    Args:
        catalog: Remote catalog (``MusicBrainzClient`` or a fake)
        registry: Entity registry
        ledger: Release ledger
        throttle: Paces remote calls (default: 1 second after each)
        strategy: Retry strategy for a full fetch (default: 3 attempts)
        page_size: Browse page size
        clock: Returns wall-clock unix seconds
        logger: Optional structlog logger
    """

    def __init__(
        self,
        catalog: CatalogClient,
        registry: EntityRegistry,
        ledger: ReleaseLedger,
        *,
        throttle: RequestThrottle | None = None,
        strategy: RetryStrategy | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], float] = time.time,
        logger: Any = None,
    ):
        self.catalog = catalog
        self.registry = registry
        self.ledger = ledger
        self.throttle = throttle or RequestThrottle()
        self.strategy = strategy or ConstantBackoff(max_attempts=3)
        self.page_size = page_size
        self.clock = clock
        self._log = logger or get_logger(__name__)

    # -- identity ----------------------------------------------------------

    def resolve_identity(self, name_or_id: str) -> Result[CatalogArtist]:
        """Resolve a name (or MBID) typed by the operator to a catalog artist.

        Name search first; if it finds nothing usable, the string itself is
        looked up as an id. Both are real requests.

        Returns:
            ``Ok(CatalogArtist)`` or ``Err(EntityNotFoundError)``
        """
        log = self._log.bind(artist=name_or_id)

        matches = self.catalog.search(name_or_id)
        self.throttle.pause()
        match matches:
            case Ok([first, *_]):
                found = self.catalog.lookup(first.id)
                self.throttle.pause()
                if found.is_ok():
                    return found
                log.debug("search_match_lookup_failed", artist_id=first.id, error=str(found.error))
            case Ok(_):
                log.debug("search_no_matches")
            case Err(error):
                log.debug("search_failed", error=str(error))

        found = self.catalog.lookup(name_or_id)
        self.throttle.pause()
        match found:
            case Ok():
                return found
            case Err(error):
                log.debug("id_lookup_failed", error=str(error))
                return Err(
                    EntityNotFoundError(f"Unable to find artist {name_or_id!r}", cause=error)
                    .with_context(artist=name_or_id)
                )

    # -- fetch -------------------------------------------------------------

    def fetch_all_subrecords(self, entity_id: str) -> Result[list[CatalogReleaseGroup]]:
        """Page through every release group of *entity_id*.

        Stops at the first empty page. Any failed page fails the whole
        fetch; partial listings are never returned.
        """
        collected: list[CatalogReleaseGroup] = []
        offset = 0
        while True:
            page = self.catalog.list_subrecords(entity_id, limit=self.page_size, offset=offset)
            self.throttle.pause()
            match page:
                case Err(error):
                    return Err(error)
                case Ok([]):
                    return Ok(collected)
                case Ok(items):
                    collected.extend(items)
                    offset += self.page_size

    # -- sync --------------------------------------------------------------

    def sync_entity(
        self,
        entity_id: str,
        is_new_entity: bool,
        display_name: str | None = None,
    ) -> SyncOutcome:
        """Fetch the artist's release groups and record the unseen ones.

        Seeded rows (``is_new_entity``) get ``recorded_at = 0`` so a freshly
        added artist's back catalog never floods the feed.
        """
        outcome = SyncOutcome(entity_id=entity_id, display_name=display_name)
        log = self._log.bind(artist=display_name or entity_id, artist_id=entity_id)

        def on_retry(attempt: int, error: Exception, delay: float) -> None:
            log.info("sync_retry", attempt=attempt, error=str(error))

        ctx = RetryContext(strategy=self.strategy, on_retry=on_retry, sleep=self.throttle.sleep)
        result = ctx.run(lambda: self.fetch_all_subrecords(entity_id))
        outcome.attempts = ctx.attempts

        match result:
            case Err(error):
                outcome.failed = True
                outcome.error = error
                log.warning("sync_failed", attempts=ctx.attempts, error=str(error))
                return outcome
            case Ok(groups):
                outcome.fetched = len(groups)

        known = self.ledger.known_ids()
        for group in groups:
            if group.id in known:
                continue
            record = ReleaseRecord(
                release_id=group.id,
                entity_id=entity_id,
                title=group.display_title,
                kind=group.kind,
                release_date=group.first_release_date,
                recorded_at=0 if is_new_entity else int(self.clock()),
            )
            if self.ledger.insert(record):
                outcome.inserted.append(record.release_id)
                (log.debug if record.is_seeded else log.info)(
                    "release_added",
                    title=record.title,
                    type=record.kind,
                    release_date=str(record.release_date),
                )
            known.add(record.release_id)

        log.info(
            "artist_synced",
            fetched=outcome.fetched,
            inserted=outcome.inserted_count,
            seeded=is_new_entity,
        )
        return outcome

    def sync_all_active_entities(self) -> list[SyncOutcome]:
        """Sync every active artist, one at a time.

        The active list is read in full before the first insert. A failed
        artist is logged and skipped; the rest of the batch still runs.
        """
        entities = self.registry.list_active()
        self._log.info("sync_started", artists=len(entities))

        outcomes = [
            self.sync_entity(entity.entity_id, is_new_entity=False, display_name=entity.display_name)
            for entity in entities
        ]

        self._log.info(
            "sync_finished",
            artists=len(outcomes),
            failed=sum(1 for o in outcomes if o.failed),
            inserted=sum(o.inserted_count for o in outcomes),
        )
        return outcomes
