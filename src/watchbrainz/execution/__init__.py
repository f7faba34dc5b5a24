"""Execution helpers: bounded retry over Results and request pacing."""

from watchbrainz.execution.retry import ConstantBackoff, RetryContext, RetryStrategy
from watchbrainz.execution.throttle import RequestThrottle

__all__ = [
    "ConstantBackoff",
    "RetryContext",
    "RetryStrategy",
    "RequestThrottle",
]
