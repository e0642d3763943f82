"""Retry executor with exponential backoff, jitter and cooperative cancellation.

Providers wrap a single vendor call in :func:`with_retry`; provider selection
(strategies) and dispatching never retry on their own.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from dataclasses import replace
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from comms_sdk.core.exceptions import RetryCancelledError
from comms_sdk.infra.metrics import track_retry_attempt, track_retry_exhausted

from .options import (
    DEFAULT_RETRYABLE_STATUS_CODES,
    RetryAttemptInfo,
    RetryOptions,
    ShouldRetryContext,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def is_retryable_status_code(
    status_code: int | None,
    retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
) -> bool:
    """Return True if ``status_code`` is in the retryable table."""
    if status_code is None:
        return False
    return status_code in tuple(retryable_status_codes)


def extract_status_code(error: BaseException) -> int | None:
    """Find an HTTP status code on an exception.

    Checks ``error.status_code`` and ``error.status`` first, then the same
    attributes on ``error.response`` (httpx responses expose ``status_code``).

    Returns:
        The status code, or None for errors without one (network failures).
    """
    for owner in (error, getattr(error, "response", None)):
        if owner is None:
            continue
        for name in ("status_code", "status"):
            value = getattr(owner, name, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


def calculate_backoff(attempt: int, options: RetryOptions | None = None) -> float:
    """Compute the delay before retry number ``attempt``.

    The exponential part is ``base_delay * 2 ** (attempt - 1)`` capped at
    ``max_delay``; jitter is added after the cap, so the total can exceed
    ``max_delay`` by up to ``max_jitter``.

    Args:
        attempt: Retry number, 1-based. Values below 1 are treated as 1.
        options: Retry options; defaults are used when omitted.

    Returns:
        Delay in seconds.

    Example:
        calculate_backoff(1, RetryOptions(jitter=False))  # 1.0
        calculate_backoff(3, RetryOptions(jitter=False))  # 4.0
    """
    options = options or RetryOptions()
    exponent = max(1, attempt) - 1
    delay = min(options.max_delay, options.base_delay * (2**exponent))
    if options.jitter and options.max_jitter > 0:
        delay += random.uniform(0, options.max_jitter)
    return delay


def _should_retry(options: RetryOptions, context: ShouldRetryContext) -> bool:
    if options.should_retry is not None:
        return bool(options.should_retry(context))
    if context.status_code is None:
        # no status means a transport level failure
        return True
    return is_retryable_status_code(context.status_code, options.retryable_status_codes)


def _ensure_not_cancelled(options: RetryOptions) -> None:
    if options.signal is not None and options.signal.is_set():
        raise RetryCancelledError


async def _wait(delay: float, options: RetryOptions) -> None:
    if options.signal is None:
        await asyncio.sleep(delay)
        return
    try:
        await asyncio.wait_for(options.signal.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return
    raise RetryCancelledError


async def with_retry(
    operation: Callable[[], Awaitable[R]],
    options: RetryOptions | None = None,
) -> R:
    """Run ``operation`` with bounded retries.

    On failure the status code of the error decides eligibility (unless
    ``options.should_retry`` is set); errors without a status code are retried.
    Ineligible errors and the error of the last attempt propagate unchanged.

    Args:
        operation: Zero-argument coroutine function performing one attempt.
        options: Retry configuration.

    Returns:
        The first successful result of ``operation``.

    Raises:
        RetryCancelledError: If ``options.signal`` is set before an attempt or
            during a wait. Never retried.

    Example:
        response = await with_retry(
            lambda: client.post(url, json=payload),
            RetryOptions(max_retries=2, base_delay=0.5),
        )
    """
    options = options or RetryOptions()
    attempt = 0

    while True:
        _ensure_not_cancelled(options)
        attempt += 1
        try:
            return await operation()
        except RetryCancelledError:
            raise
        except Exception as e:
            status_code = extract_status_code(e)
            context = ShouldRetryContext(attempt=attempt, error=e, status_code=status_code)

            if attempt > options.max_retries:
                if options.max_retries > 0:
                    track_retry_exhausted()
                    logger.warning(
                        f"All retry attempts exhausted after {attempt} attempts: {e}",
                        extra={"attempts": attempt, "status_code": status_code},
                    )
                raise

            if not _should_retry(options, context):
                logger.debug(
                    f"Non-retryable error on attempt {attempt}: {e}",
                    extra={"attempt": attempt, "status_code": status_code},
                )
                raise

            delay = calculate_backoff(attempt, options)
            track_retry_attempt(status_code)
            logger.info(
                f"Retrying after {delay:.2f}s (attempt {attempt}/{options.max_retries})",
                extra={
                    "attempt": attempt,
                    "max_retries": options.max_retries,
                    "delay": delay,
                    "status_code": status_code,
                    "exception": str(e),
                },
            )

            if options.on_retry is not None:
                hook_result = options.on_retry(RetryAttemptInfo(attempt=attempt, error=e, delay=delay))
                if inspect.isawaitable(hook_result):
                    await hook_result

            await _wait(delay, options)


def retryable(
    options: RetryOptions | None = None,
    **overrides: Any,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator form of :func:`with_retry`.

    Example:
        @retryable(max_retries=2, base_delay=0.2)
        async def fetch_status(message_id: str) -> dict:
            ...
    """
    resolved = replace(options or RetryOptions(), **overrides)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return await with_retry(lambda: func(*args, **kwargs), resolved)

        return wrapper

    return decorator
