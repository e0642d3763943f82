"""Infobip WhatsApp provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError, ValidationError
from comms_sdk.core.schemas import WhatsappRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig

MEDIA_TYPES = frozenset({"image", "document", "audio", "video", "sticker"})


class InfobipConfig(ProviderConfig):
    base_url: str = Field(min_length=1)
    api_key: str = Field(min_length=1)


class InfobipWhatsappProvider(BaseProvider):
    """Send WhatsApp messages through Infobip.

    The endpoint is ``{baseUrl}/whatsapp/1/message/{type}``; template messages
    are posted as a one element array.
    """

    provider_type = "infobip"
    config_model = InfobipConfig
    request_model = WhatsappRequest

    config: InfobipConfig

    def validate_content(self, message: WhatsappRequest) -> None:
        if message.type == "text" and not message.text:
            msg = "WhatsApp text message must include text"
            raise ValidationError(msg, field="text")
        if message.type == "template" and not message.template_name:
            msg = "WhatsApp template message must include templateName"
            raise ValidationError(msg, field="templateName")
        if message.type in MEDIA_TYPES and not message.media_url:
            msg = f"WhatsApp {message.type} message must include mediaUrl"
            raise ValidationError(msg, field="mediaUrl")

    def build_payload(self, message: WhatsappRequest) -> dict[str, Any]:
        content = {
            "text": message.text,
            "mediaUrl": message.media_url,
            "templateName": message.template_name,
            "templateData": message.template_data,
        }
        payload: dict[str, Any] = {
            "from": message.from_.replace("+", ""),
            "to": message.to.replace("+", ""),
            "content": {key: value for key, value in content.items() if value is not None},
        }
        if message.message_id:
            payload["messageId"] = message.message_id
        payload.update(message.model_extra or {})
        return payload

    async def _do_send(self, request: dict[str, Any]) -> str:
        message = self.parse_request(request)
        self.validate_content(message)
        payload = self.build_payload(message)

        response = await http_request(
            f"{self.config.base_url.rstrip('/')}/whatsapp/1/message/{message.type}",
            "POST",
            headers={"Authorization": f"App {self.config.api_key}"},
            json=[payload] if message.type == "template" else payload,
            throw_on_error=False,
        )
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            messages = body.get("messages") if isinstance(body.get("messages"), list) else [body]
            message_id = messages[0].get("messageId") if messages else None
            if message_id:
                return message_id
            raise ProviderError(
                "Infobip API returned success but no messageId",
                self.id,
                self.channel,
                "INVALID_RESPONSE",
            )

        service_exception = (body.get("requestError") or {}).get("serviceException") or {}
        detail = ", ".join(f"{key}: {value}" for key, value in service_exception.items())
        raise ProviderError(
            f"Infobip API error: {detail or response.status_code}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=response.status_code,
        )


__all__ = ["InfobipConfig", "InfobipWhatsappProvider"]
