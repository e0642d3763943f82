"""Provider that only logs the (redacted) request.

Used as the default for channels without any configured provider, and
available as ``{"type": "logger"}`` on every channel.
"""

from __future__ import annotations

import json
import secrets
from typing import Any

from comms_sdk.infra.logging import get_lazy_logger, redact_pii

from .base import BaseProvider

lazy_logger = get_lazy_logger(__name__)


class LoggerProvider(BaseProvider):
    """Log the request and return a random message id.

    Example:
        provider = LoggerProvider("sms")
        await provider.send({"to": "+15551234567", "text": "hi"})  # 'id-...'
    """

    provider_type = "logger"

    async def _do_send(self, request: dict[str, Any]) -> str:
        redacted = redact_pii(request)
        self._logger.info(
            f'[{self.channel.upper()}] Sent by "{self.id}"',
            extra={"request": redacted},
        )
        lazy_logger.debug(
            "%s payload: %s",
            self.id,
            lambda: json.dumps(redacted, default=str, sort_keys=True),
        )
        return f"id-{secrets.randbelow(1_000_000_000)}"


__all__ = ["LoggerProvider"]
