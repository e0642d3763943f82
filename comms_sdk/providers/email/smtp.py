"""SMTP email provider using aiosmtplib.

Supports implicit TLS (``secure``), STARTTLS (``requireTls``), plain
connections (``ignoreTls``) and LOGIN/PLAIN authentication.

Usage:
    provider = SmtpProvider("email", SmtpConfig(host="smtp.example.com", port=587))
    message_id = await provider.send({"from": "a@x.io", "to": "b@y.io", "subject": "Hi", "text": "..."})
"""

from __future__ import annotations

import logging
import ssl
from datetime import datetime, timezone
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import format_datetime, make_msgid
from typing import Any

import aiosmtplib
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import EmailRequest
from comms_sdk.providers.base import BaseProvider, ProviderConfig

logger = logging.getLogger(__name__)


class SmtpAuth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: str
    password: str = Field(alias="pass")


class SmtpConfig(ProviderConfig):
    host: str = "localhost"
    port: int = Field(default=587, ge=1, le=65535)
    secure: bool = False
    require_tls: bool = Field(
        default=False,
        validation_alias=AliasChoices("requireTLS", "requireTls", "require_tls"),
    )
    ignore_tls: bool = Field(
        default=False,
        validation_alias=AliasChoices("ignoreTLS", "ignoreTls", "ignore_tls"),
    )
    validate_certs: bool = True
    auth: SmtpAuth | None = None
    timeout: float = Field(default=30.0, gt=0)


class SmtpProvider(BaseProvider):
    """Deliver email through an SMTP relay."""

    provider_type = "smtp"
    config_model = SmtpConfig
    request_model = EmailRequest

    config: SmtpConfig

    def _create_ssl_context(self) -> ssl.SSLContext | None:
        if self.config.ignore_tls:
            return None
        context = ssl.create_default_context()
        if not self.config.validate_certs:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _start_tls(self) -> bool | None:
        if self.config.secure or self.config.ignore_tls:
            return False
        if self.config.require_tls:
            return True
        # upgrade when the server offers STARTTLS
        return None

    async def _do_send(self, request: dict[str, Any]) -> str:
        return await self.deliver(self.parse_request(request))

    async def deliver(self, email: EmailRequest) -> str:
        """Send an already validated email and return its Message-ID."""
        mime_message = self._build_mime_message(email)
        message_id = mime_message["Message-ID"]

        smtp = aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            use_tls=self.config.secure,
            start_tls=self._start_tls(),
            tls_context=self._create_ssl_context(),
            timeout=self.config.timeout,
        )
        try:
            async with smtp:
                if self.config.auth is not None:
                    await smtp.login(self.config.auth.user, self.config.auth.password)
                errors, _response = await smtp.send_message(mime_message)
        except aiosmtplib.SMTPAuthenticationError as e:
            msg = f"SMTP authentication failed: {e}"
            raise ProviderError(msg, self.id, self.channel, "AUTH_FAILED", cause=e) from e
        except aiosmtplib.SMTPRecipientsRefused as e:
            msg = f"All recipients refused: {e}"
            raise ProviderError(msg, self.id, self.channel, "RECIPIENTS_REFUSED", cause=e) from e
        except aiosmtplib.SMTPException as e:
            msg = f"SMTP error: {e}"
            raise ProviderError(msg, self.id, self.channel, "SMTP_ERROR", cause=e) from e

        if errors:
            logger.warning(
                "Some SMTP recipients rejected",
                extra={"message_id": message_id, "rejected": list(errors)},
            )
        return message_id

    def _build_mime_message(self, email: EmailRequest) -> MIMEMultipart:
        mime_msg = MIMEMultipart("mixed")
        mime_msg["From"] = email.from_
        mime_msg["To"] = email.to
        if email.cc:
            mime_msg["Cc"] = ", ".join(email.cc)
        if email.bcc:
            mime_msg["Bcc"] = ", ".join(email.bcc)
        mime_msg["Subject"] = email.subject
        mime_msg["Message-ID"] = make_msgid(domain=self.config.host)
        mime_msg["Date"] = format_datetime(datetime.now(timezone.utc))
        if email.reply_to:
            mime_msg["Reply-To"] = email.reply_to
        if email.id:
            mime_msg["X-Notification-Id"] = email.id
        if email.user_id:
            mime_msg["X-User-Id"] = email.user_id
        for key, value in (email.headers or {}).items():
            mime_msg[key] = str(value)

        if email.text and email.html:
            alt_part = MIMEMultipart("alternative")
            alt_part.attach(MIMEText(email.text, "plain", "utf-8"))
            alt_part.attach(MIMEText(email.html, "html", "utf-8"))
            mime_msg.attach(alt_part)
        elif email.html:
            mime_msg.attach(MIMEText(email.html, "html", "utf-8"))
        elif email.text:
            mime_msg.attach(MIMEText(email.text, "plain", "utf-8"))

        for attachment in email.attachments or []:
            content = attachment.content
            if isinstance(content, str):
                content = content.encode("utf-8")
            maintype, _, subtype = attachment.content_type.partition("/")
            part = MIMEBase(maintype or "application", subtype or "octet-stream")
            part.set_payload(content)
            encoders.encode_base64(part)
            part["Content-Disposition"] = f'attachment; filename="{attachment.filename}"'
            mime_msg.attach(part)

        return mime_msg


__all__ = ["SmtpAuth", "SmtpConfig", "SmtpProvider"]
