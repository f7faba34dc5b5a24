"""
Structured error types for watchbrainz.

Every failure the sync run can hit is classified here so callers can decide
between "retry", "skip this artist" and "abort the run" without inspecting
exception messages.

Architecture:
    ::

        WatchbrainzError (retryable, retry_after, context, cause)
        ├── TransientError (retryable)
        │   ├── NetworkError
        │   └── RateLimitError
        ├── SourceError
        │   ├── EntityNotFoundError
        │   ├── SourceUnavailableError (retryable)
        │   └── ParseError
        ├── ConfigError
        │   ├── MissingConfigError
        │   └── FeedWriteError
        └── DatabaseError
            └── DatabaseNotFoundError

Handling rules:
    - Remote errors are returned inside ``Err`` by the catalog client and
      are retried by the sync engine while ``retryable`` is true.
    - ``EntityNotFoundError`` is reported to the operator, never retried.
    - ``DatabaseError`` is raised, not returned; it aborts the run because
      the dedup ledger is only correct if every write lands.

Examples:
    >>> error = NetworkError("Connection reset")
    >>> error.retryable
    True
    >>> error = EntityNotFoundError("No artist matches 'xyz'")
    >>> error.with_context(artist="xyz").context.artist
    'xyz'

Tags:
    errors, retry-logic, error-handling, watchbrainz
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        artist: Artist name or id the operation was running for
        url: URL that was being requested
        http_status: HTTP status code if applicable
        metadata: Additional key-value pairs
    """

    artist: str | None = None
    url: str | None = None
    http_status: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class WatchbrainzError(Exception):
    """
    Base exception for all watchbrainz errors.

    Subclasses set ``default_retryable``; callers may still override it per
    instance (a ``ParseError`` raised for a truncated body is worth retrying).
    """

    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> WatchbrainzError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(NetworkError("Failed").with_context(
                artist="Boards of Canada",
                url="https://musicbrainz.org/ws/2/artist",
            ))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, retryable={self.retryable})"


# =============================================================================
# TRANSIENT ERRORS
# =============================================================================


class TransientError(WatchbrainzError):
    """Temporary error; the same request may succeed after the throttle delay."""

    default_retryable = True


class NetworkError(TransientError):
    """Transport-level failure (connect, read timeout, reset)."""


class RateLimitError(TransientError):
    """The catalog rejected the request for exceeding its rate limit."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: int = 1,
        **kwargs: Any,
    ):
        super().__init__(message, retry_after=retry_after, **kwargs)


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(WatchbrainzError):
    """Error reported by the remote catalog."""


class EntityNotFoundError(SourceError):
    """An artist could not be resolved by name nor by id."""


class SourceUnavailableError(SourceError):
    """Catalog temporarily unavailable (5xx)."""

    default_retryable = True


class ParseError(SourceError):
    """Catalog response could not be decoded or validated."""


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(WatchbrainzError):
    """Configuration error. Never retryable."""


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class FeedWriteError(ConfigError):
    """The configured feed file cannot be written."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        super().__init__(f"Cannot write feed file {path}: {cause.strerror or cause}; check set-file", cause=cause)


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class DatabaseError(WatchbrainzError):
    """Database query or write failure. Fatal for the run."""


class DatabaseNotFoundError(DatabaseError):
    """Database file does not exist and creation was not requested."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} does not exist; re-run with init to create")


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, WatchbrainzError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def get_retry_after(error: Exception) -> int | None:
    """Get retry delay from error, if specified."""
    if isinstance(error, WatchbrainzError):
        return error.retry_after
    return None


__all__ = [
    "ErrorContext",
    "WatchbrainzError",
    "TransientError",
    "NetworkError",
    "RateLimitError",
    "SourceError",
    "EntityNotFoundError",
    "SourceUnavailableError",
    "ParseError",
    "ConfigError",
    "MissingConfigError",
    "FeedWriteError",
    "DatabaseError",
    "DatabaseNotFoundError",
    "is_retryable",
    "get_retry_after",
]
