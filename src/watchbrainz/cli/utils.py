"""
CLI utility helpers - consoles, wiring and error-to-exit-code mapping.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from watchbrainz.catalog.client import MusicBrainzClient
from watchbrainz.config import FeedConfig, FeedConfigStore
from watchbrainz.core.database import open_database
from watchbrainz.core.errors import ConfigError, DatabaseError, DatabaseNotFoundError
from watchbrainz.core.settings import WatchbrainzSettings
from watchbrainz.execution.retry import ConstantBackoff
from watchbrainz.execution.throttle import RequestThrottle
from watchbrainz.feed import FeedRenderer
from watchbrainz.ledger import ReleaseLedger
from watchbrainz.lifecycle import LifecycleManager
from watchbrainz.registry import EntityRegistry
from watchbrainz.sync import SyncEngine

console = Console()
err_console = Console(stderr=True)

EXIT_DATABASE = 1
EXIT_CONFIG = 2


@dataclass
class CliState:
    """Global options, stored on the typer context."""

    settings: WatchbrainzSettings
    database: Path
    quiet: bool = False


@dataclass
class Services:
    """Everything a command needs, wired on one connection."""

    conn: Any
    client: MusicBrainzClient
    registry: EntityRegistry
    ledger: ReleaseLedger
    feed_config: FeedConfigStore
    engine: SyncEngine
    lifecycle: LifecycleManager
    renderer: FeedRenderer

    def write_feed(self, config: FeedConfig) -> Path:
        return self.renderer.write(config.feed_file, config.feed_url)


# ── Error handling ───────────────────────────────────────────────────────


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn fatal watchbrainz errors into a message and an exit code."""
    try:
        yield
    except DatabaseNotFoundError as e:
        err_console.print(f"[bold red]Error[/bold red]: {e.message}")
        raise typer.Exit(code=EXIT_DATABASE) from e
    except DatabaseError as e:
        err_console.print(f"[bold red]Database error[/bold red]: {e.message}")
        raise typer.Exit(code=EXIT_DATABASE) from e
    except ConfigError as e:
        err_console.print(f"[bold red]Configuration error[/bold red]: {e.message}")
        raise typer.Exit(code=EXIT_CONFIG) from e


# ── Wiring ───────────────────────────────────────────────────────────────


def get_connection(state: CliState, *, create: bool = False) -> Any:
    """Open the database named by ``--database`` (or the settings default)."""
    return open_database(state.database, create=create)


def build_services(conn: Any, settings: WatchbrainzSettings, client: MusicBrainzClient) -> Services:
    registry = EntityRegistry(conn)
    ledger = ReleaseLedger(conn)
    engine = SyncEngine(
        client,
        registry,
        ledger,
        throttle=RequestThrottle(delay=settings.request_delay_sec),
        strategy=ConstantBackoff(max_attempts=settings.max_attempts),
        page_size=settings.page_size,
    )
    return Services(
        conn=conn,
        client=client,
        registry=registry,
        ledger=ledger,
        feed_config=FeedConfigStore(conn),
        engine=engine,
        lifecycle=LifecycleManager(registry, engine),
        renderer=FeedRenderer(
            ledger,
            site_url=settings.site_url,
            feed_size=settings.feed_size,
            max_age_days=settings.max_age_days,
        ),
    )


def make_client(settings: WatchbrainzSettings) -> MusicBrainzClient:
    return MusicBrainzClient(
        user_agent=settings.user_agent,
        base_url=settings.api_base_url,
        timeout=settings.http_timeout,
    )


@contextmanager
def open_services(state: CliState) -> Iterator[Services]:
    """Open the database and catalog client for one command."""
    conn = get_connection(state)
    try:
        with make_client(state.settings) as client:
            yield build_services(conn, state.settings, client)
    finally:
        conn.close()


# ── Input helpers ────────────────────────────────────────────────────────


def read_names(argument: str | None) -> list[str]:
    """The single *argument*, or one name per non-blank stdin line."""
    if argument is not None:
        return [argument]
    return [line.strip() for line in sys.stdin if line.strip()]
