"""Rotating strategy distributing load evenly across providers."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ConfigurationError

from .base import ChannelSender, send_with

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from comms_sdk.core.schemas import ProviderSendResult
    from comms_sdk.providers.base import Provider


class RotationCursor:
    """Counter whose read-and-increment is a single locked step.

    Safe when channel senders are driven from several threads or event loops.
    """

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def advance(self) -> int:
        """Return the current position and move to the next one."""
        with self._lock:
            value = self._value
            self._value += 1
            return value


def strategy_roundrobin(providers: Sequence[Provider]) -> ChannelSender:
    """Send each call with the next provider in rotation.

    Every channel sender built by this function owns its own cursor. Exactly
    one attempt is made per call; there is no failover.

    Raises:
        ConfigurationError: If ``providers`` is empty.
    """
    if not providers:
        msg = "Round-robin strategy requires at least one provider"
        raise ConfigurationError(msg, "ROUNDROBIN_REQUIRES_PROVIDER")

    ordered = tuple(providers)
    cursor = RotationCursor()

    async def send(request: Mapping[str, Any]) -> ProviderSendResult:
        provider = ordered[cursor.advance() % len(ordered)]
        return await send_with(provider, request)

    send.cursor = cursor  # type: ignore[attr-defined]
    return send
