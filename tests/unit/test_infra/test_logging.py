"""Unit tests for logging context, formatting and configuration."""

from __future__ import annotations

import json
import logging
from logging.handlers import QueueHandler

import pytest

from comms_sdk.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    LazyString,
    RedactingFilter,
    clear_log_context,
    configure_logging,
    get_lazy_logger,
    get_log_context,
    get_logger,
    set_log_context,
    shutdown,
)


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("comms_sdk.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestLogContext:
    """Test suite for ContextVar log context."""

    def test_set_get_clear(self):
        set_log_context(notification_id="n-1")
        set_log_context(user_id="u-1")

        assert get_log_context() == {"notification_id": "n-1", "user_id": "u-1"}

        clear_log_context()
        assert get_log_context() == {}

    def test_filter_injects_without_overwriting(self):
        set_log_context(notification_id="n-1", channel="sms")
        record = make_record(channel="email")

        ContextInjectingFilter().filter(record)

        assert record.notification_id == "n-1"
        assert record.channel == "email"

    def test_bound_logger_merges_extra(self, caplog):
        logger = get_logger("comms_sdk.test", channel="sms").bind(provider_id="p")

        with caplog.at_level(logging.INFO, logger="comms_sdk.test"):
            logger.info("Sent", extra={"message_id": "m"})

        record = caplog.records[-1]
        assert (record.channel, record.provider_id, record.message_id) == ("sms", "p", "m")


@pytest.mark.unit
class TestLazyLogging:
    """Test suite for lazy log evaluation."""

    def test_disabled_level_skips_evaluation(self):
        logger = get_lazy_logger("comms_sdk.lazy")
        logger.logger.setLevel(logging.INFO)
        calls = []

        logger.debug("payload %s", lambda: calls.append(1))

        assert calls == []

    def test_lazy_string(self):
        assert str(LazyString(lambda: 42)) == "42"


@pytest.mark.unit
class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_includes_extras_and_static_fields(self):
        formatter = JSONFormatter(static={"service": "comms-sdk"})

        data = json.loads(formatter.format(make_record("Sent", channel="sms")))

        assert data["message"] == "Sent"
        assert data["level"] == "INFO"
        assert data["service"] == "comms-sdk"
        assert data["channel"] == "sms"
        assert data["timestamp"].endswith("Z")

    def test_dispatch_fields_come_first_and_skip_unset(self):
        record = make_record(
            "Channel failed",
            attempt=2,
            provider_id="sms-twilio-provider",
            channel="sms",
            notification_id="n-1",
            user_id=None,
        )

        data = json.loads(JSONFormatter().format(record))

        assert list(data)[:7] == [
            "timestamp",
            "level",
            "logger",
            "message",
            "notification_id",
            "channel",
            "provider_id",
        ]
        assert "user_id" not in data
        assert data["attempt"] == 2


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_installs_queue_handler_with_filters(self):
        root = logging.getLogger()
        previous_handlers = list(root.handlers)
        try:
            configure_logging(log_level="DEBUG", json_logs=True, capture_warnings=False)

            queue_handlers = [h for h in root.handlers if isinstance(h, QueueHandler)]
            assert len(queue_handlers) == 1
            filter_types = {type(f) for f in queue_handlers[0].filters}
            assert {ContextInjectingFilter, RedactingFilter} <= filter_types
            assert root.level == logging.DEBUG
        finally:
            shutdown()
            root.handlers = previous_handlers

    def test_console_disabled_installs_no_queue(self):
        root = logging.getLogger()
        previous_handlers = list(root.handlers)
        try:
            configure_logging(console_enabled=False, capture_warnings=False)
            for _ in range(50):
                logging.getLogger("comms_sdk.test").warning("dropped")

            assert not any(isinstance(h, QueueHandler) for h in root.handlers)
            assert any(isinstance(h, logging.NullHandler) for h in root.handlers)
        finally:
            shutdown()
            root.handlers = previous_handlers
