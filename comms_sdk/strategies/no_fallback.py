"""Single provider strategy, used for debugging and the notification catcher."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ConfigurationError

from .base import ChannelSender, send_with

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from comms_sdk.core.schemas import ProviderSendResult
    from comms_sdk.providers.base import Provider


def strategy_no_fallback(providers: Sequence[Provider]) -> ChannelSender:
    """Always send with the first provider; failures propagate immediately."""
    if not providers:
        msg = "No-fallback strategy requires at least one provider"
        raise ConfigurationError(msg, "NO_FALLBACK_REQUIRES_PROVIDER")

    provider = providers[0]

    async def send(request: Mapping[str, Any]) -> ProviderSendResult:
        return await send_with(provider, request)

    return send
