"""Twilio Programmable Voice provider."""

from __future__ import annotations

from typing import Any

from comms_sdk.core.schemas import VoiceRequest
from comms_sdk.providers.base import BaseProvider
from comms_sdk.providers.sms.twilio import TwilioApiMixin, TwilioConfig


class TwilioVoiceProvider(TwilioApiMixin, BaseProvider):
    """Place a call whose TwiML is served from ``request.url``."""

    provider_type = "twilio"
    config_model = TwilioConfig
    request_model = VoiceRequest

    def build_form(self, voice: VoiceRequest) -> dict[str, Any]:
        form: dict[str, Any] = {"From": voice.from_, "To": voice.to, "Url": voice.url}
        optional = {
            "Method": voice.method,
            "FallbackUrl": voice.fallback_url,
            "FallbackMethod": voice.fallback_method,
            "StatusCallback": voice.status_callback,
            "StatusCallbackEvent": voice.status_callback_event,
            "SendDigits": voice.send_digits,
            "MachineDetection": voice.machine_detection,
            "MachineDetectionTimeout": voice.machine_detection_timeout,
            "Timeout": voice.timeout,
        }
        for key, value in optional.items():
            if value:
                form[key] = value if isinstance(value, list) else str(value)
        return form

    async def _do_send(self, request: dict[str, Any]) -> str:
        return await self.post_form("Calls", self.build_form(self.parse_request(request)))


__all__ = ["TwilioVoiceProvider"]
