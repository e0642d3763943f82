"""Prometheus metrics for notification dispatch.

Usage:
    from comms_sdk.infra.metrics.notifications import channel_sends_total

    channel_sends_total.labels(channel="email", status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Dispatch Metrics
# =============================================================================

channel_sends_total = Counter(
    "comms_channel_sends_total",
    "Total number of per-channel dispatch outcomes",
    labelnames=["channel", "status"],
)
"""
Counter for per-channel outcomes of Sender.send.

Labels:
    channel: Channel name (email, sms, push, ...)
    status: success or error
"""

notifications_total = Counter(
    "comms_notifications_total",
    "Total number of notifications dispatched",
    labelnames=["status"],
)
"""Aggregate status of each Sender.send call."""

# =============================================================================
# Provider Metrics
# =============================================================================

provider_sends_total = Counter(
    "comms_provider_sends_total",
    "Total number of provider send attempts",
    labelnames=["channel", "provider", "status"],
)
"""
Counter for every provider attempt, including failed fallback attempts.

Labels:
    channel: Channel name
    provider: Provider id (e.g. email-sendgrid-provider)
    status: success or failed
"""

provider_send_duration_seconds = Histogram(
    "comms_provider_send_duration_seconds",
    "Provider send duration in seconds",
    labelnames=["channel", "provider"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
"""Histogram of provider call latency, retries included."""

# =============================================================================
# Retry Metrics
# =============================================================================

retry_attempts_total = Counter(
    "comms_retry_attempts_total",
    "Total number of retries scheduled by the retry executor",
    labelnames=["reason"],
)
"""
Labels:
    reason: HTTP status code that triggered the retry, or "network"
"""

retry_exhausted_total = Counter(
    "comms_retry_exhausted_total",
    "Total number of operations that failed after exhausting retries",
)
