"""Retry decisions and linear backoff for transport attempts."""

from dataclasses import dataclass
from typing import Protocol

from request_client.errors import TransportFailure

BACKOFF_STEP_MS = 200
TOO_MANY_REQUESTS = 429


class RetryBounds(Protocol):
    retry_max: int
    min_backoff_ms: int
    max_backoff_ms: int


def is_retryable(failure: BaseException) -> bool:
    """Return True when ``failure`` is a transient transport failure.

    HTTP failures are retried on 429 or any status above 499. Failures without
    a response are retried only for timeouts and connection-level errors.
    """
    if not isinstance(failure, TransportFailure):
        return False
    status = failure.status_code
    if status is None:
        return failure.timed_out or failure.connection_error
    return status == TOO_MANY_REQUESTS or status > 499


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded linear backoff over ``retry_max`` additional attempts."""

    retry_max: int
    min_backoff_ms: int
    max_backoff_ms: int

    @classmethod
    def from_options(cls, options: RetryBounds) -> "RetryPolicy":
        """Take the retry bounds from a ``ClientConfig`` or merged call options."""
        return cls(
            retry_max=options.retry_max,
            min_backoff_ms=options.min_backoff_ms,
            max_backoff_ms=options.max_backoff_ms,
        )

    def backoff_ms(self, retry_number: int) -> int:
        """Delay before retry ``retry_number`` (1-based), clamped to the bounds."""
        if retry_number < 1:
            raise ValueError("retry_number must be 1 or greater.")
        delay = max(self.min_backoff_ms, retry_number * BACKOFF_STEP_MS)
        return min(self.max_backoff_ms, delay)

    def should_retry(self, attempt: int, failure: BaseException) -> bool:
        """Decide whether a failed ``attempt`` (1-based) gets another try."""
        return attempt <= self.retry_max and is_retryable(failure)


@dataclass(slots=True)
class AttemptRecord:
    """Per-call bookkeeping for the attempt loop."""

    attempt: int = 0
    backoff_ms: int = 0
    last_error: BaseException | None = None
