"""Unit tests for Prometheus tracking helpers."""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from comms_sdk.infra.metrics import (
    track_channel_send,
    track_notification,
    track_provider_send,
    track_retry_attempt,
    track_retry_exhausted,
)


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


@pytest.mark.unit
class TestTracking:
    """Test suite for metric helpers."""

    def test_channel_send(self):
        labels = {"channel": "sms", "status": "error"}
        before = sample("comms_channel_sends_total", labels)

        track_channel_send("sms", success=False)

        assert sample("comms_channel_sends_total", labels) == before + 1

    def test_notification(self):
        before = sample("comms_notifications_total", {"status": "success"})

        track_notification(success=True)

        assert sample("comms_notifications_total", {"status": "success"}) == before + 1

    def test_provider_send_records_duration(self):
        labels = {"channel": "email", "provider": "metrics-test-provider"}
        before = sample("comms_provider_send_duration_seconds_count", labels)

        track_provider_send("email", "metrics-test-provider", success=True, duration=0.2)

        assert sample("comms_provider_send_duration_seconds_count", labels) == before + 1
        assert sample("comms_provider_sends_total", {**labels, "status": "success"}) >= 1

    def test_retry_attempt_reason(self):
        before_status = sample("comms_retry_attempts_total", {"reason": "503"})
        before_network = sample("comms_retry_attempts_total", {"reason": "network"})

        track_retry_attempt(503)
        track_retry_attempt(None)

        assert sample("comms_retry_attempts_total", {"reason": "503"}) == before_status + 1
        assert sample("comms_retry_attempts_total", {"reason": "network"}) == before_network + 1

    def test_retry_exhausted(self):
        before = sample("comms_retry_exhausted_total")

        track_retry_exhausted()

        assert sample("comms_retry_exhausted_total") == before + 1
