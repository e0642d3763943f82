"""Sequential failover strategy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ConfigurationError

from .base import ChannelSender, send_with

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from comms_sdk.core.schemas import ProviderSendResult
    from comms_sdk.providers.base import Provider

logger = logging.getLogger(__name__)


def strategy_fallback(providers: Sequence[Provider]) -> ChannelSender:
    """Try providers in configured order until one succeeds.

    When every provider fails, the last provider's error is raised with its
    ``provider_id`` set.

    Raises:
        ConfigurationError: If ``providers`` is empty.
    """
    if not providers:
        msg = "Fallback strategy requires at least one provider"
        raise ConfigurationError(msg, "FALLBACK_REQUIRES_PROVIDER")

    ordered = tuple(providers)

    async def send(request: Mapping[str, Any]) -> ProviderSendResult:
        for provider, next_provider in zip(ordered, ordered[1:]):
            try:
                return await send_with(provider, request)
            except Exception as e:
                logger.warning(
                    f"Provider {provider.id} failed, falling back to {next_provider.id}: {e}",
                    extra={"provider_id": provider.id, "next_provider_id": next_provider.id},
                )
        return await send_with(ordered[-1], request)

    return send
