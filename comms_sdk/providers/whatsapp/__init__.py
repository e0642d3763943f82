"""WhatsApp providers."""

from __future__ import annotations

from .infobip import InfobipWhatsappProvider

__all__ = ["InfobipWhatsappProvider"]
