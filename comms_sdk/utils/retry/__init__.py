"""Retry executor used by providers around individual vendor calls.

Example:
    from comms_sdk.utils.retry import RetryOptions, with_retry

    message_id = await with_retry(send_once, RetryOptions(max_retries=2))
"""

from __future__ import annotations

from comms_sdk.core.exceptions import RetryCancelledError

from .executor import (
    calculate_backoff,
    extract_status_code,
    is_retryable_status_code,
    retryable,
    with_retry,
)
from .options import (
    DEFAULT_RETRYABLE_STATUS_CODES,
    RetryAttemptInfo,
    RetryOptions,
    ShouldRetryContext,
)

__all__ = [
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "RetryAttemptInfo",
    "RetryCancelledError",
    "RetryOptions",
    "ShouldRetryContext",
    "calculate_backoff",
    "extract_status_code",
    "is_retryable_status_code",
    "retryable",
    "with_retry",
]
