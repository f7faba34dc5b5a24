"""Open the watchbrainz database.

``open_database()`` is the single entry point for getting a connection.
A missing file is an operator error (they forgot ``watchbrainz init``), so
it is reported instead of silently creating an empty database that would
then "successfully" track nothing.

Usage::

    from watchbrainz.core.database import open_database

    conn = open_database("watchbrainz.db", create=True)   # init
    conn = open_database("watchbrainz.db")                # everything else
    conn = open_database(":memory:", create=True)         # tests
"""

from __future__ import annotations

from pathlib import Path

from watchbrainz.core.errors import DatabaseNotFoundError
from watchbrainz.core.logging import get_logger
from watchbrainz.core.schema import create_tables
from watchbrainz.core.sqlite_conn import SqliteConnection

logger = get_logger(__name__)

MEMORY = ":memory:"


def open_database(path: str | Path, *, create: bool = False) -> SqliteConnection:
    """Open (and optionally create) the SQLite database at *path*.

    Parameters
    ----------
    path:
        Database file, or ``":memory:"`` for an ephemeral database.
    create:
        Create the file and apply the schema if needed.  Without it a
        missing file raises :class:`DatabaseNotFoundError`.

    Returns
    -------
    SqliteConnection
    """
    path_str = str(path)
    if path_str == MEMORY:
        conn = SqliteConnection(MEMORY)
        if create:
            create_tables(conn)
        return conn

    db_path = Path(path_str).expanduser()
    if not create and not db_path.exists():
        raise DatabaseNotFoundError(str(db_path))

    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = SqliteConnection(str(db_path.resolve()))
    if create:
        create_tables(conn)
        logger.info("database_initialized", path=str(db_path))
    return conn
