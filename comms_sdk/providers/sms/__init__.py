"""SMS providers."""

from __future__ import annotations

from .nexmo import NexmoProvider
from .twilio import TwilioSmsProvider

__all__ = ["NexmoProvider", "TwilioSmsProvider"]
