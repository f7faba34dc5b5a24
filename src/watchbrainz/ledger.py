"""
Release ledger - the append-only ``ReleaseGroups`` table.

Rows are inserted once and never updated. The ledger is both the dedup
index for the sync engine (``known_ids``) and the data source for the
feed (``recent_for_feed``).

Each insert is committed on its own so an interrupted run never leaves a
half-applied batch behind.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from watchbrainz.core.dates import format_date, parse_stored_date
from watchbrainz.core.logging import get_logger
from watchbrainz.core.schema import TABLES
from watchbrainz.models import FeedItem, ReleaseRecord

ARTISTS = TABLES["artists"]
RELEASE_GROUPS = TABLES["release_groups"]


class ReleaseLedger:
    """Append-only store of release groups."""

    def __init__(self, conn: Any, logger: Any = None):
        self.conn = conn
        self._log = logger or get_logger(__name__)

    def known_ids(self) -> set[str]:
        """Every release-group id already recorded, for any artist."""
        self.conn.execute(f"SELECT ReleaseGroupId FROM {RELEASE_GROUPS}")
        return {row[0] for row in self.conn.fetchall()}

    def insert(self, record: ReleaseRecord) -> bool:
        """Insert *record* unless its id is already present.

        Returns:
            True if a row was written, False for a duplicate id
        """
        self.conn.execute(
            f"""
            INSERT INTO {RELEASE_GROUPS}
                (ReleaseGroupId, ArtistId, Title, Type, ReleaseDate, AddTime)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(ReleaseGroupId) DO NOTHING
            """,
            (
                record.release_id,
                record.entity_id,
                record.title,
                record.kind,
                format_date(record.release_date),
                record.recorded_at,
            ),
        )
        written = self.conn.rowcount > 0
        self.conn.commit()
        return written

    def count(self, entity_id: str | None = None) -> int:
        if entity_id is None:
            self.conn.execute(f"SELECT COUNT(*) FROM {RELEASE_GROUPS}")
        else:
            self.conn.execute(
                f"SELECT COUNT(*) FROM {RELEASE_GROUPS} WHERE ArtistId = ?", (entity_id,)
            )
        return self.conn.fetchone()[0]

    def recent_for_feed(self, min_release_date: date, limit: int) -> list[FeedItem]:
        """Newest-recorded releases of active artists.

        Args:
            min_release_date: Releases dated before this are left out
            limit: Maximum number of rows

        Returns:
            Items ordered by ``recorded_at`` descending
        """
        self.conn.execute(
            f"""
            SELECT a.ArtistId, a.Name, r.ReleaseGroupId, r.Title, r.Type,
                   r.ReleaseDate, r.AddTime
            FROM {ARTISTS} a
            JOIN {RELEASE_GROUPS} r ON a.ArtistId = r.ArtistId
            WHERE a.Active = 1 AND r.ReleaseDate >= ?
            ORDER BY r.AddTime DESC, r.ReleaseGroupId ASC
            LIMIT ?
            """,
            (format_date(min_release_date), limit),
        )
        items = []
        for row in self.conn.fetchall():
            record = ReleaseRecord(
                release_id=row[2],
                entity_id=row[0],
                title=row[3],
                kind=row[4],
                release_date=parse_stored_date(row[5]),
                recorded_at=int(row[6]),
            )
            items.append(FeedItem(entity_id=row[0], display_name=row[1], record=record))
        return items
