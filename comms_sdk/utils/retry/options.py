"""Retry configuration and per-attempt value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable, Callable

DEFAULT_RETRYABLE_STATUS_CODES: tuple[int, ...] = (408, 429, 500, 502, 503, 504)


@dataclass(frozen=True)
class ShouldRetryContext:
    """Information handed to a ``should_retry`` predicate.

    Attributes:
        attempt: Number of the attempt that just failed (1-based).
        error: The exception raised by that attempt.
        status_code: HTTP status extracted from the error, if any.
    """

    attempt: int
    error: BaseException
    status_code: int | None = None


@dataclass(frozen=True)
class RetryAttemptInfo:
    """Information handed to an ``on_retry`` hook before waiting.

    Attributes:
        attempt: Number of the retry about to be made (1-based).
        error: The exception that triggered the retry.
        delay: Seconds the executor will wait before the retry.
    """

    attempt: int
    error: BaseException
    delay: float


@dataclass(frozen=True)
class RetryOptions:
    """Retry executor configuration.

    Delays are expressed in seconds. ``max_retries=0`` disables retrying.

    Attributes:
        max_retries: Retries after the initial attempt.
        base_delay: Delay before the first retry.
        max_delay: Upper bound of the exponential part of the delay.
        jitter: Add ``random(0, max_jitter)`` seconds to each delay.
        max_jitter: Upper bound of the jitter.
        retryable_status_codes: Status codes that make an error retryable.
        should_retry: Predicate overriding the status code table.
        on_retry: Hook called before each wait. May be async.
        signal: Cancellation signal; once set, no new attempt starts and any
            pending wait is aborted with ``RetryCancelledError``.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: bool = True
    max_jitter: float = 1.0
    retryable_status_codes: tuple[int, ...] = DEFAULT_RETRYABLE_STATUS_CODES
    should_retry: Callable[[ShouldRetryContext], bool] | None = None
    on_retry: Callable[[RetryAttemptInfo], Awaitable[Any] | Any] | None = None
    signal: asyncio.Event | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            msg = "max_retries must be >= 0"
            raise ValueError(msg)
        if self.base_delay < 0 or self.max_delay < 0 or self.max_jitter < 0:
            msg = "delays must be >= 0"
            raise ValueError(msg)
