"""Logging infrastructure: configuration, context, lazy evaluation and redaction.

Example:
    from comms_sdk.infra.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, channel="email")
    logger.info("Sending")
"""

from __future__ import annotations

from .config import configure_logging, setup_logging, shutdown
from .context import (
    ContextBoundLogger,
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)
from .formatters import JSONFormatter
from .lazy import LazyLoggerAdapter, LazyString, get_lazy_logger
from .redaction import RedactingFilter, redact_pii

__all__ = [
    "ContextBoundLogger",
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "LazyString",
    "RedactingFilter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "get_logger",
    "redact_pii",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
