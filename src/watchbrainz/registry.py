"""
Entity registry - the ``Artists`` table.

Entities are never deleted; removal flips ``Active`` off. Lookups accept
either the MBID or the stored display name, and an id match wins when a
string happens to match both (one artist's id as another's name).
"""

from __future__ import annotations

from typing import Any

from watchbrainz.core.logging import get_logger
from watchbrainz.core.schema import TABLES
from watchbrainz.models import Entity

ARTISTS = TABLES["artists"]


def _row_to_entity(row: Any) -> Entity:
    return Entity(entity_id=row[0], display_name=row[1], active=bool(row[2]))


class EntityRegistry:
    """Reads and writes tracked artists on one connection."""

    def __init__(self, conn: Any, logger: Any = None):
        self.conn = conn
        self._log = logger or get_logger(__name__)

    def find(self, name_or_id: str) -> Entity | None:
        """Look up an artist by id, then by display name."""
        self.conn.execute(
            f"SELECT ArtistId, Name, Active FROM {ARTISTS} WHERE ArtistId = ?",
            (name_or_id,),
        )
        row = self.conn.fetchone()
        if row is None:
            self.conn.execute(
                f"SELECT ArtistId, Name, Active FROM {ARTISTS} WHERE Name = ? ORDER BY ArtistId LIMIT 1",
                (name_or_id,),
            )
            row = self.conn.fetchone()
        return _row_to_entity(row) if row is not None else None

    def add(self, entity_id: str, display_name: str) -> Entity:
        """Insert a new active artist."""
        self.conn.execute(
            f"INSERT INTO {ARTISTS} (ArtistId, Name, Active) VALUES (?, ?, 1)",
            (entity_id, display_name),
        )
        self.conn.commit()
        return Entity(entity_id=entity_id, display_name=display_name, active=True)

    def set_active(self, entity_id: str, active: bool) -> None:
        self.conn.execute(
            f"UPDATE {ARTISTS} SET Active = ? WHERE ArtistId = ?",
            (1 if active else 0, entity_id),
        )
        self.conn.commit()
        self._log.debug("artist_active_changed", artist_id=entity_id, active=active)

    def delete(self, entity_id: str) -> None:
        """Forget an artist entirely."""
        self.conn.execute(f"DELETE FROM {ARTISTS} WHERE ArtistId = ?", (entity_id,))
        self.conn.commit()

    def list_active(self) -> list[Entity]:
        """All active artists, fully materialised, ordered by name."""
        self.conn.execute(
            f"SELECT ArtistId, Name, Active FROM {ARTISTS} WHERE Active = 1 ORDER BY Name ASC"
        )
        return [_row_to_entity(row) for row in self.conn.fetchall()]

    def list_active_names(self) -> list[str]:
        return [e.display_name for e in self.list_active()]
