"""Foundation layer: errors, Result, logging, settings and storage plumbing.

Architecture::

    errors.py        Structured error hierarchy (WatchbrainzError, TransientError)
    result.py        Result[T] envelope (Ok / Err)
    logging.py       structlog configuration and get_logger()
    settings.py      WatchbrainzSettings (pydantic-settings, WATCHBRAINZ_*)
    sqlite_conn.py   SqliteConnection adapter
    schema.py        DDL for Artists, ReleaseGroups, Config
    database.py      open_database()
    dates.py         Partial-date parsing and the UNSET_DATE sentinel
"""
