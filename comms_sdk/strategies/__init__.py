"""Provider selection strategies.

A strategy is a function taking a channel's provider list and returning the
channel sender used by :class:`comms_sdk.sender.Sender`. The four built-ins
are referenced by name in configuration; any callable with the same contract
can be used instead.

Example:
    send = resolve_strategy("roundrobin", "sms")(providers)
    result = await send({"to": "+15551234567", "text": "hi"})
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from comms_sdk.core.exceptions import ConfigurationError

from .base import ChannelSender, Strategy, attach_provider_id
from .fallback import strategy_fallback
from .no_fallback import strategy_no_fallback
from .roundrobin import RotationCursor, strategy_roundrobin
from .weighted import select_weighted_provider, strategy_weighted

if TYPE_CHECKING:
    from collections.abc import Mapping

    from comms_sdk.core.config import ChannelConfig

STRATEGIES: dict[str, Strategy] = {
    "fallback": strategy_fallback,
    "no-fallback": strategy_no_fallback,
    "roundrobin": strategy_roundrobin,
    "weighted": strategy_weighted,
}


def resolve_strategy(strategy: str | Strategy | None, channel: str) -> Strategy:
    """Validate and resolve a configured strategy.

    Raises:
        ConfigurationError: If the strategy is missing, or is neither a
            callable nor a built-in strategy name.
    """
    names = ", ".join(STRATEGIES)
    if not strategy:
        msg = (
            f'Channel "{channel}" is missing multiProviderStrategy. '
            f"Strategy must be a function or one of: {names}"
        )
        raise ConfigurationError(msg, "MISSING_STRATEGY")
    if callable(strategy):
        return strategy
    if strategy not in STRATEGIES:
        msg = (
            f'"{strategy}" is not a valid strategy for channel "{channel}". '
            f"Strategy must be a function or one of: {names}"
        )
        raise ConfigurationError(msg, "UNKNOWN_STRATEGY")
    return STRATEGIES[strategy]


def build_strategies(channels: Mapping[str, ChannelConfig]) -> dict[str, Strategy]:
    """Resolve the strategy of every configured channel."""
    return {
        name: resolve_strategy(config.multi_provider_strategy, name)
        for name, config in channels.items()
    }


__all__ = [
    "STRATEGIES",
    "ChannelSender",
    "RotationCursor",
    "Strategy",
    "attach_provider_id",
    "build_strategies",
    "resolve_strategy",
    "select_weighted_provider",
    "strategy_fallback",
    "strategy_no_fallback",
    "strategy_roundrobin",
    "strategy_weighted",
]
