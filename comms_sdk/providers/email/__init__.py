"""Email providers."""

from __future__ import annotations

from .mailgun import MailgunProvider
from .sendgrid import SendgridProvider
from .smtp import SmtpProvider

__all__ = ["MailgunProvider", "SendgridProvider", "SmtpProvider"]
