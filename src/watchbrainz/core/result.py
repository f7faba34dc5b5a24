"""
Result envelope for catalog calls.

Remote catalog calls return ``Ok[T]`` or ``Err[T]`` instead of raising, so
the sync engine's retry loop is ordinary data flow: each attempt produces a
value, and the retry loop inspects it.

Architecture:
    ::

        Result[T] = Ok[T] | Err[T]

        Ok(value)   ── map() ──▶ Ok(f(value))
        Err(error)  ── map() ──▶ Err(error)

Examples:
    >>> from watchbrainz.core.result import Ok, Err
    >>> match Ok([1, 2]):
    ...     case Ok([first, *_]):
    ...         print(first)
    ...     case Err(error):
    ...         print(error)
    1
    >>> Err(ValueError("oops")).map(len).unwrap_or(0)
    0

Tags:
    result-pattern, error-handling, watchbrainz
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result carrying the error that ended the call."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


__all__ = [
    "Ok",
    "Err",
    "Result",
]
