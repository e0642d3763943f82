"""JSON log formatter for dispatch logs."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

# Dispatch fields written right after the base fields, in this order.
DISPATCH_FIELDS: tuple[str, ...] = (
    "notification_id",
    "user_id",
    "channel",
    "provider_id",
)

# LogRecord attributes that never end up in the JSON object.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the dispatch fields first.

    ``notification_id``, ``user_id``, ``channel`` and ``provider_id`` come from
    the log context or from ``extra`` and are written only when set. Any other
    ``extra`` field follows them. When an OpenTelemetry span is active its
    trace and span ids are added so dispatch logs line up with the caller's
    traces.

    Example output:
        ```json
        {"timestamp": "2026-01-01T00:00:00.123Z", "level": "WARNING", "logger": "comms_sdk.sender", "message": "Channel \\"sms\\" failed: busy", "notification_id": "n-1", "channel": "sms", "provider_id": "sms-twilio-provider"}
        ```
    """

    def __init__(self, static: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in DISPATCH_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            data["trace_id"] = format(span_context.trace_id, "032x")
            data["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key not in data and key not in DISPATCH_FIELDS:
                data[key] = value

        data.update(self.static)
        return json.dumps(data, ensure_ascii=False, default=str)


__all__ = ["DISPATCH_FIELDS", "JSONFormatter"]
