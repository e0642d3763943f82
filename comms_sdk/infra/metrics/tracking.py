"""Helper functions for recording dispatch metrics."""

from __future__ import annotations

from . import notifications


def track_channel_send(channel: str, success: bool) -> None:
    """Record a per-channel dispatch outcome.

    Example:
        track_channel_send("sms", success=False)
    """
    notifications.channel_sends_total.labels(
        channel=channel,
        status="success" if success else "error",
    ).inc()


def track_notification(success: bool) -> None:
    """Record the aggregate status of one notification."""
    notifications.notifications_total.labels(status="success" if success else "error").inc()


def track_provider_send(channel: str, provider_id: str, success: bool, duration: float) -> None:
    """Record one provider attempt and its latency.

    Args:
        channel: Channel name.
        provider_id: Provider id.
        success: Whether the attempt succeeded.
        duration: Attempt duration in seconds.
    """
    notifications.provider_sends_total.labels(
        channel=channel,
        provider=provider_id,
        status="success" if success else "failed",
    ).inc()
    notifications.provider_send_duration_seconds.labels(
        channel=channel,
        provider=provider_id,
    ).observe(duration)


def track_retry_attempt(status_code: int | None) -> None:
    """Record a scheduled retry, labelled by the status code that caused it."""
    reason = str(status_code) if status_code is not None else "network"
    notifications.retry_attempts_total.labels(reason=reason).inc()


def track_retry_exhausted() -> None:
    """Record an operation that failed after its last retry."""
    notifications.retry_exhausted_total.inc()
