"""
CLI layer for watchbrainz.

Handles argument parsing, wiring and exit codes; the work happens in the
lifecycle manager, sync engine and feed renderer.

Entry point::

    watchbrainz --help
"""

from watchbrainz.cli.app import app

__all__ = ["app"]
