"""Mailgun email provider."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import EmailRequest
from comms_sdk.infra.http import request as http_request
from comms_sdk.providers.base import BaseProvider, ProviderConfig


class MailgunConfig(ProviderConfig):
    api_key: str = Field(min_length=1)
    domain_name: str = Field(min_length=1)
    host: str = "api.mailgun.net"
    version: str = "v3"


class MailgunProvider(BaseProvider):
    """Send email through the Mailgun messages API (form encoded)."""

    provider_type = "mailgun"
    config_model = MailgunConfig
    request_model = EmailRequest

    config: MailgunConfig

    @property
    def url(self) -> str:
        return f"https://{self.config.host}/{self.config.version}/{self.config.domain_name}/messages"

    def build_form(self, email: EmailRequest) -> dict[str, Any]:
        form: dict[str, Any] = {
            "from": email.from_,
            "to": email.to,
            "subject": email.subject,
        }
        if email.text:
            form["text"] = email.text
        if email.html:
            form["html"] = email.html
        if email.reply_to:
            form["h:Reply-To"] = email.reply_to
        if email.cc:
            form["cc"] = list(email.cc)
        if email.bcc:
            form["bcc"] = list(email.bcc)
        for header, value in (email.headers or {}).items():
            form[f"h:{header}"] = str(value)
        if email.id:
            form["v:Notification-Id"] = email.id
        if email.user_id:
            form["v:User-Id"] = email.user_id
        return form

    def build_files(self, email: EmailRequest) -> list[tuple[str, tuple[str, bytes, str]]] | None:
        if not email.attachments:
            return None
        return [
            (
                "attachment",
                (
                    attachment.filename,
                    attachment.content.encode("utf-8")
                    if isinstance(attachment.content, str)
                    else attachment.content,
                    attachment.content_type,
                ),
            )
            for attachment in email.attachments
        ]

    async def _do_send(self, request: dict[str, Any]) -> str:
        email = self.parse_request(request)
        response = await http_request(
            self.url,
            "POST",
            auth=("api", self.config.api_key),
            data=self.build_form(email),
            files=self.build_files(email),
            throw_on_error=False,
        )
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_success:
            return body.get("id", "")
        raise ProviderError(
            f"Mailgun API error: {body.get('message', response.text)}",
            self.id,
            self.channel,
            "API_ERROR",
            status_code=response.status_code,
        )


__all__ = ["MailgunConfig", "MailgunProvider"]
