"""SQLite connection adapter.

Wraps a raw :class:`sqlite3.Connection` so stores can call ``execute()``
followed by ``fetchone()`` / ``fetchall()`` on the connection itself, and
so every driver failure surfaces as :class:`~watchbrainz.core.errors.DatabaseError`.

The adapter keeps a single cursor. Issuing a new ``execute()`` discards
the previous result set, so callers that iterate over a query while writing
must ``fetchall()`` first (the batch sync does exactly that).

Usage::

    from watchbrainz.core.sqlite_conn import SqliteConnection

    conn = SqliteConnection(":memory:")
    conn.execute("CREATE TABLE t (id INTEGER)")
    conn.execute("INSERT INTO t VALUES (?)", (1,))
    conn.execute("SELECT * FROM t")
    row = conn.fetchone()
    conn.commit()
    conn.close()
"""

from __future__ import annotations

import sqlite3
from typing import Any

from watchbrainz.core.errors import DatabaseError


class SqliteConnection:
    """Adapter: ``sqlite3.Connection`` → connection protocol used by the stores."""

    def __init__(self, path: str = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        self.path = path
        try:
            self._conn = sqlite3.connect(path)
        except sqlite3.Error as e:
            raise DatabaseError(f"Cannot open database {path}: {e}", cause=e) from e
        self._conn.row_factory = row_factory
        self._cursor = self._conn.cursor()

    # -- Connection protocol -----------------------------------------------

    def execute(self, sql: str, params: tuple = ()) -> Any:
        try:
            self._cursor.execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}", cause=e).with_context(sql=sql) from e
        return self._cursor

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        return self._cursor.fetchall()

    def commit(self) -> None:
        try:
            self._conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(f"Commit failed: {e}", cause=e) from e

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    # -- convenience -------------------------------------------------------

    @property
    def rowcount(self) -> int:
        """Rows affected by the last statement."""
        return self._cursor.rowcount

    def __enter__(self) -> SqliteConnection:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SqliteConnection({self.path!r})"
