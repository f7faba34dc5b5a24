"""Bounded retry over Result-returning attempts.

The sync engine never retries by catching exceptions: each attempt returns
``Ok`` or ``Err`` and :class:`RetryContext` decides, from the error's
``retryable`` flag and the strategy's attempt bound, whether to go again.

Example:
    >>> from watchbrainz.execution.retry import ConstantBackoff, RetryContext
    >>>
    >>> ctx = RetryContext(ConstantBackoff(max_attempts=3))
    >>> result = ctx.run(lambda: client.list_subrecords(artist_id, limit=100, offset=0))
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from watchbrainz.core.errors import get_retry_after, is_retryable
from watchbrainz.core.result import Err, Ok, Result

T = TypeVar("T")


class RetryStrategy(ABC):
    """Abstract base for retry strategies."""

    @abstractmethod
    def next_delay(self, attempt: int) -> float:
        """Calculate delay before the next attempt.

        Args:
            attempt: Number of attempts made so far (1 after the first failure)

        Returns:
            Delay in seconds before next attempt
        """
        ...

    @abstractmethod
    def should_retry(self, attempt: int, error: Exception | None = None) -> bool:
        """Determine if another attempt should be made.

        Args:
            attempt: Number of attempts made so far
            error: The error returned by the last attempt

        Returns:
            True if should retry, False otherwise
        """
        ...


@dataclass
class ConstantBackoff(RetryStrategy):
    """At most ``max_attempts`` attempts, a constant delay between them.

    Non-retryable errors (see :func:`~watchbrainz.core.errors.is_retryable`)
    stop immediately regardless of the remaining budget.
    """

    max_attempts: int = 3
    delay: float = 0.0

    def next_delay(self, attempt: int) -> float:
        """Return constant delay."""
        return self.delay

    def should_retry(self, attempt: int, error: Exception | None = None) -> bool:
        """Check if retry should be attempted."""
        if attempt >= self.max_attempts:
            return False
        if error is not None and not is_retryable(error):
            return False
        return True


@dataclass
class RetryContext:
    """Context tracking retry state.

    Example:
        >>> ctx = RetryContext(ConstantBackoff(max_attempts=3))
        >>> result = ctx.run(lambda: fetch_page())
        >>> ctx.attempts
        1
    """

    strategy: RetryStrategy
    on_retry: Callable[[int, Exception, float], None] | None = None
    sleep: Callable[[float], None] = time.sleep
    attempt: int = field(default=0, init=False)

    @property
    def attempts(self) -> int:
        """Number of attempts made."""
        return self.attempt

    def run(self, func: Callable[[], Result[T]]) -> Result[T]:
        """Call *func* until it returns ``Ok`` or the strategy gives up.

        Every attempt is a full, fresh call; nothing from a failed attempt is
        carried into the next one.

        Returns:
            The first ``Ok``, or the last ``Err`` when retries are exhausted
        """
        while True:
            self.attempt += 1
            result = func()
            match result:
                case Ok():
                    return result
                case Err(error):
                    if not self.strategy.should_retry(self.attempt, error):
                        return result

                    delay = max(
                        self.strategy.next_delay(self.attempt),
                        get_retry_after(error) or 0,
                    )

                    if self.on_retry:
                        self.on_retry(self.attempt, error, delay)

                    if delay > 0:
                        self.sleep(delay)
