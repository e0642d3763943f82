"""Request and result schemas.

Channel requests are plain mappings on the public surface; providers validate
them into the pydantic models below. Field names are accepted both in their
wire (camelCase) form and in snake_case.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Keys of a notification request that never name a channel.
METADATA_KEYS = frozenset({"id", "userId", "metadata", "customize"})

NotificationRequest = Mapping[str, Any]


class ChannelRequest(BaseModel):
    """Fields shared by every channel request."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        arbitrary_types_allowed=True,
    )

    id: str | None = None
    user_id: str | None = None


class Attachment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content_type: str
    filename: str
    content: str | bytes


class EmailRequest(ChannelRequest):
    from_: str = Field(alias="from")
    to: str
    subject: str
    cc: list[str] | None = None
    bcc: list[str] | None = None
    reply_to: str | None = None
    text: str | None = None
    html: str | None = None
    attachments: list[Attachment] | None = None
    headers: dict[str, str | int | bool] | None = None


class SmsRequest(ChannelRequest):
    from_: str = Field(alias="from")
    to: str
    text: str
    type: Literal["text", "unicode"] | None = None
    nature: Literal["marketing", "transactional"] | None = None
    ttl: int | None = None
    message_class: Literal[0, 1, 2, 3] | None = None


class VoiceRequest(ChannelRequest):
    from_: str = Field(alias="from")
    to: str
    url: str
    method: str | None = None
    fallback_url: str | None = None
    fallback_method: str | None = None
    status_callback: str | None = None
    status_callback_event: list[str] | None = None
    send_digits: str | None = None
    machine_detection: str | None = None
    machine_detection_timeout: int | None = None
    timeout: int | None = None


class PushRequest(ChannelRequest):
    registration_token: str
    title: str
    body: str
    custom: dict[str, Any] | None = None
    priority: Literal["high", "normal"] | None = None
    badge: int | None = None
    sound: str | None = None
    icon: str | None = None
    topic: str | None = None


class WebpushKeys(BaseModel):
    auth: str
    p256dh: str


class WebpushSubscription(BaseModel):
    endpoint: str
    keys: WebpushKeys


class WebpushRequest(ChannelRequest):
    subscription: WebpushSubscription
    title: str
    body: str
    badge: str | None = None
    dir: Literal["auto", "rtl", "ltr"] | None = None
    icon: str | None = None
    image: str | None = None
    require_interaction: bool | None = None


class SlackRequest(ChannelRequest):
    text: str
    webhook_url: str | None = None
    unfurl_links: bool | None = Field(default=None, alias="unfurl_links")
    attachments: list[dict[str, Any]] | None = None


class WhatsappRequest(ChannelRequest):
    from_: str = Field(alias="from")
    to: str
    type: Literal["template", "text", "document", "image", "audio", "video", "sticker"]
    text: str | None = None
    media_url: str | None = None
    template_name: str | None = None
    template_data: dict[str, Any] | None = None
    message_id: str | None = None


class TelegramRequest(ChannelRequest):
    text: str
    chat_id: str | int | None = None
    parse_mode: Literal["HTML", "Markdown", "MarkdownV2"] | None = None
    disable_notification: bool | None = None
    reply_to_message_id: int | None = None


CHANNEL_REQUEST_MODELS: dict[str, type[ChannelRequest]] = {
    "email": EmailRequest,
    "sms": SmsRequest,
    "voice": VoiceRequest,
    "push": PushRequest,
    "webpush": WebpushRequest,
    "slack": SlackRequest,
    "whatsapp": WhatsappRequest,
    "telegram": TelegramRequest,
}


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ProviderSendResult:
    """Outcome of a successful strategy invocation for one channel."""

    id: str
    provider_id: str


@dataclass(frozen=True)
class ChannelSendResult:
    """Outcome of one channel within a single ``Sender.send`` call.

    Built only through :meth:`success_result` / :meth:`failure_result` so that
    a result is never partially populated.
    """

    success: bool
    channel: str
    provider_id: str | None = None
    id: str | None = None
    error: BaseException | None = None

    @classmethod
    def success_result(cls, channel: str, result: ProviderSendResult) -> ChannelSendResult:
        return cls(success=True, channel=channel, provider_id=result.provider_id, id=result.id)

    @classmethod
    def failure_result(
        cls,
        channel: str,
        error: BaseException,
        provider_id: str | None = None,
    ) -> ChannelSendResult:
        return cls(success=False, channel=channel, provider_id=provider_id, error=error)


class ChannelStatus(BaseModel):
    """Per-channel entry of the aggregate result."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = None
    provider_id: str | None = Field(default=None, alias="providerId")


class NotificationStatus(BaseModel):
    """Aggregate outcome of a notification across channels.

    ``status`` is ``"error"`` if and only if at least one channel failed. Every
    attempted channel appears in ``channels``; failed channels have ``id=None``
    and an entry in ``errors``.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success", "error"] = "success"
    channels: dict[str, ChannelStatus] = Field(default_factory=dict)
    errors: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the caller-facing shape (``providerId``, optional ``errors``)."""
        data = self.model_dump(by_alias=True, exclude_none=False)
        if self.errors is None:
            data.pop("errors")
        return data


def is_success_response(status: NotificationStatus) -> bool:
    return status.status == "success"


def is_error_response(status: NotificationStatus) -> bool:
    return status.status == "error"


def get_channel_ids(status: NotificationStatus) -> dict[str, str]:
    """Return ``{channel: message_id}`` for channels that succeeded."""
    return {
        channel: channel_status.id
        for channel, channel_status in status.channels.items()
        if channel_status.id is not None
    }


__all__ = [
    "CHANNEL_REQUEST_MODELS",
    "METADATA_KEYS",
    "Attachment",
    "ChannelRequest",
    "ChannelSendResult",
    "ChannelStatus",
    "EmailRequest",
    "NotificationRequest",
    "NotificationStatus",
    "ProviderSendResult",
    "PushRequest",
    "SlackRequest",
    "SmsRequest",
    "TelegramRequest",
    "VoiceRequest",
    "WebpushRequest",
    "WhatsappRequest",
    "get_channel_ids",
    "is_error_response",
    "is_success_response",
]
