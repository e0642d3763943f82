"""PII redaction for logged notification payloads.

Requests logged by the SDK (most notably by the ``logger`` provider) carry
recipient addresses, message bodies and credentials. :func:`redact_pii` returns
a redacted deep copy that is safe to write to log sinks; the original payload
is never modified.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

REDACTED_EMAIL = "[REDACTED EMAIL]"
REDACTED_PHONE = "[REDACTED PHONE]"
REDACTED_TEXT = "[REDACTED TEXT]"
REDACTED_TOKEN = "[REDACTED TOKEN]"
REDACTED_URL = "[REDACTED URL]"
REDACTED_WEBHOOK = "[REDACTED WEBHOOK]"
REDACTED_KEY = "[REDACTED KEY]"
REDACTED_CONTENT = "[REDACTED CONTENT]"

MAX_DEPTH = 10

EMAIL_FIELDS = frozenset({"from", "to", "cc", "bcc", "replyTo", "reply_to"})
PHONE_FIELDS = frozenset({"from", "to", "phone"})
TEXT_FIELDS = frozenset(
    {
        "text",
        "html",
        "subject",
        "body",
        "title",
        "pretext",
        "fallback",
        "value",
        "author_name",
    }
)
TOKEN_FIELDS = frozenset(
    {
        "registrationToken",
        "registration_token",
        "auth",
        "p256dh",
        "apiKey",
        "api_key",
        "authToken",
        "auth_token",
        "accessToken",
        "access_token",
        "refreshToken",
        "refresh_token",
        "token",
    }
)
URL_FIELDS = frozenset(
    {
        "url",
        "webhookUrl",
        "webhook_url",
        "mediaUrl",
        "media_url",
        "fallbackUrl",
        "fallback_url",
        "statusCallback",
        "status_callback",
        "endpoint",
    }
)
SAFE_FIELDS = frozenset(
    {
        "id",
        "userId",
        "user_id",
        "type",
        "method",
        "nature",
        "priority",
        "ttl",
        "messageClass",
        "message_class",
        "dir",
    }
)

_PHONE_RE = re.compile(r"^[\d+\-() ]+$")


def redact_email(email: Any) -> str:
    """Mask an email address keeping its first character and domain.

    Example:
        >>> redact_email("user@example.com")
        'u***@example.com'
    """
    if not isinstance(email, str) or "@" not in email:
        return REDACTED_EMAIL
    local, _, domain = email.partition("@")
    if not local or not domain:
        return REDACTED_EMAIL
    return f"{local[0]}***@{domain}"


def redact_phone(phone: Any) -> str:
    """Mask a phone number keeping the country prefix and last 4 digits."""
    if not isinstance(phone, str) or len(phone) < 4:
        return REDACTED_PHONE
    last_four = phone[-4:]
    prefix = phone[:2] if phone.startswith("+") else ""
    return f"{prefix}***{last_four}"


def redact_url(url: Any) -> str:
    """Keep only scheme and host of a URL."""
    if not isinstance(url, str):
        return REDACTED_URL
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return REDACTED_URL
    return f"{parts.scheme}://{parts.hostname}/[REDACTED]"


def _looks_like_phone(value: Any) -> bool:
    return isinstance(value, str) and len(value) >= 4 and bool(_PHONE_RE.match(value))


def _looks_like_email(value: Any) -> bool:
    return isinstance(value, str) and "@" in value


def _redact_address(value: Any) -> Any:
    # from/to are shared by email and phone channels; the content decides
    if value is None:
        return None
    if isinstance(value, list):
        return [_redact_address_item(item) for item in value]
    if _looks_like_phone(value):
        return redact_phone(value)
    if _looks_like_email(value):
        return redact_email(value)
    return REDACTED_EMAIL


def _redact_address_item(item: Any) -> Any:
    if _looks_like_phone(item):
        return redact_phone(item)
    if _looks_like_email(item):
        return redact_email(item)
    return item


def _redact_attachments(value: list[Any], depth: int) -> list[Any]:
    if not value:
        return value
    first = value[0]
    is_file = isinstance(first, Mapping) and (
        "content" in first or "contentType" in first or "content_type" in first
    )
    if not is_file:
        return [_redact(item, depth + 1) for item in value]
    redacted = []
    for attachment in value:
        if not isinstance(attachment, Mapping):
            redacted.append(REDACTED_CONTENT)
            continue
        redacted.append(
            {
                "contentType": attachment.get("contentType", attachment.get("content_type")),
                "filename": attachment.get("filename"),
                "content": REDACTED_CONTENT,
            }
        )
    return redacted


def _redact_subscription(value: Mapping[str, Any]) -> dict[str, Any]:
    endpoint = value.get("endpoint")
    return {
        "endpoint": redact_url(endpoint) if endpoint else REDACTED_URL,
        "keys": {"auth": REDACTED_KEY, "p256dh": REDACTED_KEY}
        if isinstance(value.get("keys"), Mapping)
        else REDACTED_KEY,
    }


def _redact_field(key: str, value: Any, depth: int) -> Any:
    if key in SAFE_FIELDS:
        return value
    if key in EMAIL_FIELDS and key in PHONE_FIELDS:
        return _redact_address(value)
    if key in EMAIL_FIELDS:
        if value is None:
            return None
        if isinstance(value, list):
            return [redact_email(item) for item in value]
        return redact_email(value)
    if key in PHONE_FIELDS:
        return None if value is None else redact_phone(value)
    if key in TOKEN_FIELDS:
        return REDACTED_TOKEN
    if key in URL_FIELDS and isinstance(value, str):
        if key in ("webhookUrl", "webhook_url"):
            return REDACTED_WEBHOOK
        return redact_url(value)
    if key in TEXT_FIELDS:
        return None if value is None else REDACTED_TEXT
    if key == "attachments" and isinstance(value, list):
        return _redact_attachments(value, depth)
    if key == "subscription" and isinstance(value, Mapping):
        return _redact_subscription(value)
    return _redact(value, depth + 1)


def _redact(data: Any, depth: int) -> Any:
    if depth > MAX_DEPTH:
        return REDACTED_CONTENT
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        return REDACTED_CONTENT
    if isinstance(data, (list, tuple)):
        return [_redact(item, depth + 1) for item in data]
    if isinstance(data, Mapping):
        return {key: _redact_field(str(key), value, depth) for key, value in data.items()}
    if callable(data):
        return None
    return data


def redact_pii(data: Any) -> Any:
    """Return a redacted copy of a notification payload.

    Nested mappings and lists are walked up to ``MAX_DEPTH`` levels; deeper
    content is replaced wholesale. Callables such as ``customize`` hooks are
    dropped.

    Args:
        data: Channel request, whole notification request or any value.

    Returns:
        Redacted copy of ``data``.

    Example:
        >>> redact_pii({"to": "+33612345678", "text": "Your code is 1234"})
        {'to': '+3***5678', 'text': '[REDACTED TEXT]'}
    """
    return _redact(data, 0)


class RedactingFilter(logging.Filter):
    """Logging filter that redacts payloads attached to log records.

    Any ``extra`` field whose name is listed in ``fields`` is replaced by its
    redacted copy before formatters see the record.

    Example:
        ```python
        logger.info("Sending", extra={"request": request})  # request is redacted
        ```
    """

    def __init__(self, fields: tuple[str, ...] = ("request", "payload")) -> None:
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self.fields:
            if hasattr(record, name):
                setattr(record, name, redact_pii(getattr(record, name)))
        return True


__all__ = [
    "REDACTED_CONTENT",
    "REDACTED_EMAIL",
    "REDACTED_KEY",
    "REDACTED_PHONE",
    "REDACTED_TEXT",
    "REDACTED_TOKEN",
    "REDACTED_URL",
    "REDACTED_WEBHOOK",
    "RedactingFilter",
    "redact_email",
    "redact_phone",
    "redact_pii",
    "redact_url",
]
