"""SendGrid email provider (v3 Mail Send API)."""

from __future__ import annotations

import base64
import secrets
from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import EmailRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class SendgridConfig(ProviderConfig):
    api_key: str = Field(min_length=1)


def encode_content(content: str | bytes) -> str:
    raw = content.encode("utf-8") if isinstance(content, str) else content
    return base64.b64encode(raw).decode("ascii")


class SendgridProvider(BaseProvider):
    """Send email through SendGrid.

    SendGrid does not return a message id synchronously, so the notification
    ``id`` (or a random hex id) is sent as a custom arg and returned.
    """

    provider_type = "sendgrid"
    config_model = SendgridConfig
    request_model = EmailRequest

    config: SendgridConfig

    def build_payload(self, email: EmailRequest, generated_id: str) -> dict[str, Any]:
        personalization: dict[str, Any] = {"to": [{"email": email.to}]}
        if email.cc:
            personalization["cc"] = [{"email": address} for address in email.cc]
        if email.bcc:
            personalization["bcc"] = [{"email": address} for address in email.bcc]

        custom_args: dict[str, str] = {"id": generated_id}
        if email.user_id is not None:
            custom_args["userId"] = email.user_id

        payload: dict[str, Any] = {
            "personalizations": [personalization],
            "from": {"email": email.from_},
            "subject": email.subject,
            "content": [
                *([{"type": "text/plain", "value": email.text}] if email.text else []),
                *([{"type": "text/html", "value": email.html}] if email.html else []),
            ],
            "custom_args": custom_args,
        }
        if email.reply_to:
            payload["reply_to"] = {"email": email.reply_to}
        if email.headers:
            payload["headers"] = {key: str(value) for key, value in email.headers.items()}
        if email.attachments:
            payload["attachments"] = [
                {
                    "type": attachment.content_type,
                    "filename": attachment.filename,
                    "content": encode_content(attachment.content),
                }
                for attachment in email.attachments
            ]
        return payload

    async def _do_send(self, request: dict[str, Any]) -> str:
        email = self.parse_request(request)
        generated_id = email.id or secrets.token_hex(16)

        response = await http_request(
            SENDGRID_API_URL,
            "POST",
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            json=self.build_payload(email, generated_id),
            throw_on_error=False,
        )
        if response.is_success:
            return generated_id

        try:
            first_error = (response.json().get("errors") or [{}])[0]
        except ValueError:
            first_error = {}
        detail = ", ".join(f"{key}: {value}" for key, value in first_error.items()) or "Unknown error"
        raise ProviderError(
            f"SendGrid API error: {detail}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=response.status_code,
        )


__all__ = ["SendgridConfig", "SendgridProvider"]
