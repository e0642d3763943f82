"""Prometheus instrumentation for the SDK."""

from __future__ import annotations

from .tracking import (
    track_channel_send,
    track_notification,
    track_provider_send,
    track_retry_attempt,
    track_retry_exhausted,
)

__all__ = [
    "track_channel_send",
    "track_notification",
    "track_provider_send",
    "track_retry_attempt",
    "track_retry_exhausted",
]
