"""Notification catcher provider.

Renders any channel request as an email and relays it to a local SMTP
catcher (MailHog, Mailpit, notification-catcher, ...) so that every channel
can be inspected in one inbox during development. Connection settings come
from ``COMMS_CATCHER_HOST`` / ``COMMS_CATCHER_PORT``.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from comms_sdk.core.exceptions import ProviderError, ValidationError
from comms_sdk.core.schemas import EmailRequest
from comms_sdk.core.settings import get_comms_settings

from .base import BaseProvider, ProviderConfig
from .email.smtp import SmtpConfig, SmtpProvider


def _truncate(text: str | None, length: int = 20) -> str:
    if not text:
        return ""
    return f"{text[:length]}..." if len(text) > length else text


def _require(request: dict[str, Any], channel: str, *fields: str) -> None:
    missing = [name for name in fields if not request.get(name)]
    if missing:
        msg = f"{channel.capitalize()} request must include {', '.join(missing)}"
        raise ValidationError(msg, field=missing[0])


def _render_email(request: dict[str, Any], sender: str) -> dict[str, Any]:
    return {
        **{key: request.get(key) for key in ("from", "to", "subject", "text", "html", "replyTo", "cc", "bcc")},
        "attachments": request.get("attachments"),
        "headers": {"X-to": f"[email] {request.get('to')}"},
    }


def _render_sms(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "sms", "to", "text")
    return {
        "from": request.get("from") or sender,
        "to": f"{request['to']}@sms",
        "subject": _truncate(request["text"]),
        "text": request["text"],
        "headers": {"X-type": "sms", "X-to": f"[sms] {request['to']}"},
    }


def _render_voice(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "voice", "to", "from", "url")
    return {
        "from": request["from"],
        "to": f"{request['to']}@voice",
        "subject": f"{request['to']}@voice",
        "text": request["url"],
        "headers": {"X-type": "voice", "X-to": f"[voice] {request['to']}"},
    }


def _render_push(request: dict[str, Any], sender: str) -> dict[str, Any]:
    token = request.get("registrationToken")
    payload = {key: value for key, value in request.items() if key != "registrationToken"}
    return {
        "from": sender,
        "to": "user@push.me",
        "subject": _truncate(request.get("title")) or "Push Notification",
        "text": json.dumps(payload, default=str, indent=2),
        "headers": {
            "X-type": "push",
            "X-to": f"[push] {token[:20] + '...' if token else 'unknown'}",
            "X-payload": json.dumps(payload, default=str),
        },
    }


def _render_webpush(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "webpush", "title")
    user_id = request.get("userId")
    payload = {key: value for key, value in request.items() if key != "subscription"}
    return {
        "from": sender,
        "to": f"{user_id or 'user'}@webpush",
        "subject": request["title"],
        "text": json.dumps(payload, default=str, indent=2),
        "headers": {
            "X-type": "webpush",
            "X-to": f"[webpush] {user_id or ''}",
            "X-payload": json.dumps(payload, default=str),
        },
    }


def _render_slack(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "slack", "text")
    return {
        "from": sender,
        "to": "public.channel@slack",
        "subject": _truncate(request["text"]),
        "text": request["text"],
        "headers": {"X-type": "slack", "X-to": "[slack public channel]"},
    }


def _render_whatsapp(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "whatsapp", "from", "to")
    rest = {key: value for key, value in request.items() if key not in ("from", "to")}
    return {
        "from": request["from"] if "@" in str(request["from"]) else sender,
        "to": f"{request['to']}@whatsapp",
        "subject": _truncate(request.get("text")) or "WhatsApp message",
        "text": json.dumps(rest, default=str, indent=2),
        "headers": {"X-type": "whatsapp", "X-to": f"[whatsapp] {request['to']}"},
    }


def _render_telegram(request: dict[str, Any], sender: str) -> dict[str, Any]:
    _require(request, "telegram", "text")
    chat_id = request.get("chatId") or "chat"
    return {
        "from": sender,
        "to": f"{chat_id}@telegram",
        "subject": _truncate(request["text"]),
        "text": request["text"],
        "headers": {"X-type": "telegram", "X-to": f"[telegram] {chat_id}"},
    }


RENDERERS: dict[str, Callable[[dict[str, Any], str], dict[str, Any]]] = {
    "email": _render_email,
    "sms": _render_sms,
    "voice": _render_voice,
    "push": _render_push,
    "webpush": _render_webpush,
    "slack": _render_slack,
    "whatsapp": _render_whatsapp,
    "telegram": _render_telegram,
}


class NotificationCatcherProvider(BaseProvider):
    """Relay any channel request to the notification catcher as an email."""

    provider_type = "notificationcatcher"

    def __init__(self, channel: str, config: ProviderConfig | None = None) -> None:
        super().__init__(channel, config)
        if channel not in RENDERERS:
            msg = f'Notification catcher does not support channel "{channel}"'
            raise ProviderError(msg, self.id, channel, "CATCHER_INIT_FAILED")
        settings = get_comms_settings()
        self._sender = settings.catcher_sender
        self._render = RENDERERS[channel]
        self._smtp = SmtpProvider(
            channel,
            SmtpConfig(
                id=self.id,
                host=settings.catcher_host,
                port=settings.catcher_port,
                ignore_tls=True,
            ),
        )

    async def _do_send(self, request: dict[str, Any]) -> str:
        rendered = self._render(request, self._sender)
        rendered.update(id=request.get("id"), userId=request.get("userId"))
        email: EmailRequest = self._smtp.parse_request(
            {key: value for key, value in rendered.items() if value is not None}
        )
        try:
            return await self._smtp.deliver(email)
        except ProviderError as e:
            msg = f"Failed to send to notification catcher: {e}"
            raise ProviderError(msg, self.id, self.channel, "CATCHER_SEND_FAILED", cause=e) from e


__all__ = ["RENDERERS", "NotificationCatcherProvider"]
