"""
Database schema.

Three tables, created idempotently:

    ┌────────────────────────────────────────────────────────────┐
    │ artists         → Artists        (entity registry)         │
    │ release_groups  → ReleaseGroups  (append-only ledger)      │
    │ config          → Config         (single-row feed config)  │
    └────────────────────────────────────────────────────────────┘

``ReleaseGroups.AddTime`` is the local discovery time in unix seconds and
is indexed because the feed orders by it. ``0`` marks rows seeded when an
artist was first added.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# TABLE NAMES
# =============================================================================

TABLES = {
    "artists": "Artists",
    "release_groups": "ReleaseGroups",
    "config": "Config",
}


# =============================================================================
# DDL STATEMENTS
# =============================================================================

DDL = {
    "artists": """
        CREATE TABLE IF NOT EXISTS Artists (
            ArtistId VARCHAR(36) NOT NULL,
            Name TEXT NOT NULL,
            Active BOOLEAN NOT NULL DEFAULT 1,
            PRIMARY KEY (ArtistId)
        )
    """,
    "artists_idx_active": """
        CREATE INDEX IF NOT EXISTS Active ON Artists (Active)
    """,
    # Release groups are never updated or deleted once inserted.
    "release_groups": """
        CREATE TABLE IF NOT EXISTS ReleaseGroups (
            ReleaseGroupId VARCHAR(36) NOT NULL,
            ArtistId VARCHAR(36) NOT NULL,
            Title TEXT NOT NULL,
            Type TEXT NOT NULL,
            ReleaseDate VARCHAR(10) NOT NULL,   -- YYYY-MM-DD, 2030-12-31 = unknown
            AddTime INTEGER NOT NULL,           -- unix seconds, 0 = seeded
            PRIMARY KEY (ReleaseGroupId)
        )
    """,
    "release_groups_idx_add_time": """
        CREATE INDEX IF NOT EXISTS AddTime ON ReleaseGroups (AddTime)
    """,
    "config": """
        CREATE TABLE IF NOT EXISTS Config (
            FeedFile VARCHAR(256) NOT NULL,
            FeedUrl VARCHAR(2048) NOT NULL
        )
    """,
}


def create_tables(conn: Any) -> None:
    """
    Create all tables and seed the config row.

    Safe to call multiple times (CREATE IF NOT EXISTS, seed only when the
    config table is empty).
    """
    for _name, ddl in DDL.items():
        conn.execute(ddl)
    conn.execute("SELECT COUNT(*) FROM Config")
    if conn.fetchone()[0] == 0:
        conn.execute("INSERT INTO Config (FeedFile, FeedUrl) VALUES ('', '')")
    conn.commit()
