"""Twilio Programmable Messaging provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import SmsRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01/Accounts"


class TwilioConfig(ProviderConfig):
    account_sid: str = Field(min_length=1)
    auth_token: str = Field(min_length=1)


class TwilioApiMixin:
    """Shared Twilio REST call: form POST with Basic auth, returns the ``sid``."""

    config: TwilioConfig
    id: str
    channel: str

    def resource_url(self, resource: str) -> str:
        return f"{TWILIO_API_BASE}/{self.config.account_sid}/{resource}.json"

    async def post_form(self, resource: str, form: dict[str, Any]) -> str:
        response = await http_request(
            self.resource_url(resource),
            "POST",
            auth=(self.config.account_sid, self.config.auth_token),
            data=form,
            throw_on_error=False,
        )
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_success and body.get("sid"):
            return body["sid"]
        raise ProviderError(
            f"{response.status_code} - {body.get('message', 'Twilio API error')}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=response.status_code,
        )


class TwilioSmsProvider(TwilioApiMixin, BaseProvider):
    provider_type = "twilio"
    config_model = TwilioConfig
    request_model = SmsRequest

    async def _do_send(self, request: dict[str, Any]) -> str:
        sms = self.parse_request(request)
        form: dict[str, Any] = {"From": sms.from_, "To": sms.to, "Body": sms.text}
        if sms.ttl:
            form["ValidityPeriod"] = str(sms.ttl)
        return await self.post_form("Messages", form)


__all__ = ["TwilioApiMixin", "TwilioConfig", "TwilioSmsProvider"]
