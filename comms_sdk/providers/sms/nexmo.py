"""Nexmo (Vonage) SMS API provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import SmsRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig

NEXMO_API_URL = "https://rest.nexmo.com/sms/json"


class NexmoConfig(ProviderConfig):
    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)


class NexmoProvider(BaseProvider):
    """Send SMS through Nexmo.

    Nexmo answers 200 even for rejected messages; a message ``status`` other
    than ``"0"`` is a failure.
    """

    provider_type = "nexmo"
    config_model = NexmoConfig
    request_model = SmsRequest

    config: NexmoConfig

    async def _do_send(self, request: dict[str, Any]) -> str:
        sms = self.parse_request(request)
        payload = {
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
            "from": sms.from_,
            "to": sms.to,
            "text": sms.text,
            "type": sms.type,
            "ttl": sms.ttl,
            "message-class": sms.message_class,
        }
        response = await http_request(
            NEXMO_API_URL,
            "POST",
            json={key: value for key, value in payload.items() if value is not None},
            throw_on_error=False,
        )
        if not response.is_success:
            raise ProviderError(
                f"HTTP {response.status_code}",
                self.id,
                self.channel,
                str(response.status_code),
                status_code=response.status_code,
            )

        messages = response.json().get("messages") or []
        if not messages:
            raise ProviderError("No message in response", self.id, self.channel)
        message = messages[0]
        if message.get("status") != "0":
            raise ProviderError(
                f"status: {message.get('status')}, error: {message.get('error-text', 'Unknown error')}",
                self.id,
                self.channel,
                message.get("status"),
            )
        return message["message-id"]


__all__ = ["NexmoConfig", "NexmoProvider"]
