"""
Root Typer application for the watchbrainz CLI.

Typical setup, then a cron entry for ``run``::

    watchbrainz init
    watchbrainz set-file ~/public_html/music.rdf
    watchbrainz set-url https://example.org/music.rdf
    watchbrainz add "Boards of Canada"
    watchbrainz run
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path

import typer
from typer import Typer

from watchbrainz import __version__
from watchbrainz.cli.utils import (
    CliState,
    console,
    exit_on_error,
    get_connection,
    open_services,
    read_names,
)
from watchbrainz.config import FeedConfigStore
from watchbrainz.core.logging import bind_context, clear_context, configure_logging, get_logger
from watchbrainz.core.settings import get_settings
from watchbrainz.lifecycle import AddOutcome
from watchbrainz.registry import EntityRegistry

app = Typer(
    name="watchbrainz",
    help="watchbrainz: RSS feed of new releases by artists you follow on MusicBrainz.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

logger = get_logger(__name__)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("watchbrainz")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"watchbrainz {v}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    database: Path | None = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database path (default: WATCHBRAINZ_DATABASE or ~/.watchbrainz/watchbrainz.db).",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """watchbrainz CLI: track artists and write the new-releases feed."""
    settings = get_settings()
    configure_logging(
        level="WARNING" if quiet else settings.log_level,
        json_format=settings.log_format == "json",
    )
    clear_context()
    bind_context(command=ctx.invoked_subcommand)
    ctx.obj = CliState(settings=settings, database=database or settings.database, quiet=quiet)


# ── Setup ────────────────────────────────────────────────────────────────


@app.command()
def init(ctx: typer.Context) -> None:
    """Create the database and its tables."""
    state: CliState = ctx.obj
    with exit_on_error():
        conn = get_connection(state, create=True)
        conn.close()
    console.print(f"Initialized [cyan]{state.database}[/cyan]")


@app.command("set-file")
def set_file(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Where to write the feed."),
) -> None:
    """Set the feed output file."""
    with exit_on_error():
        conn = get_connection(ctx.obj)
        try:
            stored = FeedConfigStore(conn).set_file(path)
        finally:
            conn.close()
    console.print(f"Feed file: [cyan]{stored}[/cyan]")


@app.command("set-url")
def set_url(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Public URL of the feed."),
) -> None:
    """Set the public URL of the feed."""
    with exit_on_error():
        conn = get_connection(ctx.obj)
        try:
            FeedConfigStore(conn).set_url(url)
        finally:
            conn.close()
    console.print(f"Feed URL: [cyan]{url}[/cyan]")


# ── Artists ──────────────────────────────────────────────────────────────


@app.command()
def add(
    ctx: typer.Context,
    artist: str | None = typer.Argument(
        None, help="Artist name or MBID. Reads one per line from stdin if omitted."
    ),
) -> None:
    """Start tracking artists, then rewrite the feed."""
    names = read_names(artist)
    with exit_on_error(), open_services(ctx.obj) as services:
        config = services.feed_config.require()
        outcomes = [services.lifecycle.add(name) for name in names]
        services.write_feed(config)

    missing = sum(1 for o in outcomes if o is AddOutcome.NOT_FOUND)
    if missing:
        logger.warning("artists_not_found", count=missing)
    unseeded = sum(1 for o in outcomes if o is AddOutcome.SEED_FAILED)
    if unseeded:
        logger.warning("artists_not_added", count=unseeded, reason="catalog unavailable; retry add later")


@app.command()
def remove(
    ctx: typer.Context,
    artist: str | None = typer.Argument(
        None, help="Artist name or MBID. Reads one per line from stdin if omitted."
    ),
) -> None:
    """Stop tracking artists, then rewrite the feed."""
    names = read_names(artist)
    with exit_on_error(), open_services(ctx.obj) as services:
        config = services.feed_config.require()
        for name in names:
            services.lifecycle.remove(name)
        services.write_feed(config)


@app.command("list")
def list_artists(ctx: typer.Context) -> None:
    """Print the names of active artists."""
    with exit_on_error():
        conn = get_connection(ctx.obj)
        try:
            names = EntityRegistry(conn).list_active_names()
        finally:
            conn.close()
    for name in names:
        typer.echo(name)


# ── Sync ─────────────────────────────────────────────────────────────────


@app.command()
def run(ctx: typer.Context) -> None:
    """Check every active artist for new releases and rewrite the feed."""
    with exit_on_error(), open_services(ctx.obj) as services:
        config = services.feed_config.require()
        outcomes = services.engine.sync_all_active_entities()
        services.write_feed(config)

    if not ctx.obj.quiet:
        new = sum(o.inserted_count for o in outcomes)
        failed = sum(1 for o in outcomes if o.failed)
        console.print(f"Checked {len(outcomes)} artists: {new} new releases, {failed} failed")
