"""Voice providers."""

from __future__ import annotations

from .twilio import TwilioVoiceProvider

__all__ = ["TwilioVoiceProvider"]
