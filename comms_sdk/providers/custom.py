"""User supplied providers declared as ``{"type": "custom", "id": ..., "send": ...}``."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ConfigurationError

from .base import BaseProvider, ProviderConfig

if TYPE_CHECKING:
    from collections.abc import Callable


class CustomProviderConfig(ProviderConfig):
    id: str
    send: Any


class CustomProvider(BaseProvider):
    """Adapter giving a user ``send`` callable the built-in provider behaviour.

    The callable receives the customized request and returns the message id,
    synchronously or as an awaitable.
    """

    provider_type = "custom"
    config_model = CustomProviderConfig

    def __init__(self, channel: str, config: CustomProviderConfig) -> None:
        super().__init__(channel, config)
        if not callable(config.send):
            msg = f'Custom provider "{config.id}" on channel "{channel}" needs a callable send'
            raise ConfigurationError(msg, "INVALID_PROVIDER_CONFIG")
        self._send: Callable[[dict[str, Any]], Any] = config.send

    async def _do_send(self, request: dict[str, Any]) -> str:
        result = self._send(request)
        if inspect.isawaitable(result):
            result = await result
        return "" if result is None else str(result)


__all__ = ["CustomProvider", "CustomProviderConfig"]
