"""watchbrainz - an RSS feed of new releases by artists you follow.

Tracks artists on MusicBrainz, records each release group the first time it
shows up, and writes an RSS 1.0 feed of the most recently discovered ones.

Architecture::

    core/        errors, Result, logging, settings, SQLite schema, dates
    execution/   bounded retry and the request throttle
    catalog/     MusicBrainz client and typed responses
    registry.py  tracked artists        (Artists)
    ledger.py    recorded releases      (ReleaseGroups)
    config.py    feed file / feed URL   (Config)
    sync.py      discovery and dedup
    lifecycle.py add / reactivate / remove
    feed.py      RSS rendering
    cli/         typer commands
"""

__version__ = "0.1.0"
