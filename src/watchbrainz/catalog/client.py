"""
MusicBrainz web service client.

Talks to the ``/ws/2`` JSON API over httpx and hands back typed models
wrapped in a ``Result``. Remote failures never escape as exceptions:

    ┌────────────────────────────────┬────────────────────────────────┐
    │ transport error / timeout      │ NetworkError          (retry)  │
    │ 429, 503                       │ RateLimitError        (retry)  │
    │ other 5xx                      │ SourceUnavailableError (retry) │
    │ 400, 404                       │ EntityNotFoundError            │
    │ other 4xx                      │ SourceError                    │
    │ undecodable / invalid body     │ ParseError            (retry)  │
    └────────────────────────────────┴────────────────────────────────┘

The client does not sleep between requests; callers pace themselves with
:class:`~watchbrainz.execution.throttle.RequestThrottle`.

Usage:
    with MusicBrainzClient(user_agent="watchbrainz/0.1 ( me@example.com )") as mb:
        matches = mb.search("Boards of Canada").unwrap_or([])
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from watchbrainz.catalog.models import (
    ArtistSearchResponse,
    CatalogArtist,
    CatalogArtistMatch,
    CatalogReleaseGroup,
    ReleaseGroupPage,
)
from watchbrainz.core.errors import (
    EntityNotFoundError,
    NetworkError,
    ParseError,
    RateLimitError,
    SourceError,
    SourceUnavailableError,
    WatchbrainzError,
)
from watchbrainz.core.logging import get_logger
from watchbrainz.core.result import Err, Ok, Result

M = TypeVar("M", bound=BaseModel)

DEFAULT_BASE_URL = "https://musicbrainz.org/ws/2"

# Characters that must be backslash-escaped inside a quoted Lucene phrase.
_PHRASE_SPECIALS = ('\\', '"')


def quote_phrase(text: str) -> str:
    """Quote *text* as a Lucene phrase for the search endpoint."""
    for ch in _PHRASE_SPECIALS:
        text = text.replace(ch, "\\" + ch)
    return f'"{text}"'


class MusicBrainzClient:
    """
    Read-only MusicBrainz client.

    Args:
        user_agent: Sent with every request; MusicBrainz blocks anonymous clients
        base_url: API root (default: https://musicbrainz.org/ws/2)
        timeout: Per-request timeout in seconds
        http_client: Optional pre-built ``httpx.Client`` (tests inject one
            backed by ``httpx.MockTransport``)
        logger: Optional structlog logger
    """

    def __init__(
        self,
        user_agent: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
        logger: Any = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._log = logger or get_logger(__name__)

    # -- catalog operations ------------------------------------------------

    def search(self, name: str, limit: int = 10) -> Result[list[CatalogArtistMatch]]:
        """Search artists by name; best match first."""
        params = {"query": f"artist:{quote_phrase(name)}", "limit": limit}
        return self._get("/artist", params, ArtistSearchResponse).map(lambda r: list(r.artists))

    def lookup(self, artist_id: str) -> Result[CatalogArtist]:
        """Fetch a single artist by MBID."""
        return self._get(f"/artist/{quote(artist_id, safe='')}", {}, CatalogArtist)

    def list_subrecords(
        self, artist_id: str, limit: int, offset: int
    ) -> Result[list[CatalogReleaseGroup]]:
        """Browse one page of the artist's release groups."""
        params = {"artist": artist_id, "limit": limit, "offset": offset}
        return self._get("/release-group", params, ReleaseGroupPage).map(
            lambda page: list(page.release_groups)
        )

    # -- plumbing ----------------------------------------------------------

    def _get(self, path: str, params: dict[str, Any], model: type[M]) -> Result[M]:
        url = f"{self.base_url}{path}"
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        self._log.debug("catalog_request", url=url, params=params)

        try:
            response = self._http_client.get(
                url, params={**params, "fmt": "json"}, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            return Err(NetworkError(f"Timed out requesting {url}", cause=e).with_context(url=url))
        except httpx.TransportError as e:
            return Err(NetworkError(f"Request to {url} failed: {e}", cause=e).with_context(url=url))

        if response.status_code >= 400:
            return Err(self._status_error(response, url))

        try:
            payload = response.json()
        except ValueError as e:
            return Err(
                ParseError(f"Invalid JSON from {url}", retryable=True, cause=e).with_context(
                    url=url, http_status=response.status_code
                )
            )

        try:
            return Ok(model.model_validate(payload))
        except ValidationError as e:
            return Err(
                ParseError(
                    f"Unexpected response shape from {url}: {e.error_count()} validation error(s)",
                    retryable=True,
                    cause=e,
                ).with_context(url=url, http_status=response.status_code)
            )

    @staticmethod
    def _status_error(response: httpx.Response, url: str) -> WatchbrainzError:
        status = response.status_code
        error: WatchbrainzError
        if status in (400, 404):
            error = EntityNotFoundError(f"Not found: {url}")
        elif status in (429, 503):
            retry_after = response.headers.get("Retry-After", "")
            error = RateLimitError(
                f"Rate limited by catalog (HTTP {status})",
                retry_after=int(retry_after) if retry_after.isdigit() else 1,
            )
        elif status >= 500:
            error = SourceUnavailableError(f"Catalog unavailable (HTTP {status})")
        else:
            error = SourceError(f"Catalog rejected request (HTTP {status})")
        return error.with_context(url=url, http_status=status)

    def close(self) -> None:
        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> MusicBrainzClient:
        return self

    def __exit__(self, *args) -> None:
        self.close()
