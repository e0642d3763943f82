"""Weighted random strategy.

Providers carry a non-negative ``weight``; the probability of being picked is
the provider's weight divided by the total weight. Zero-weight providers are
never picked while a positive-weight provider remains, which makes them last
resort providers: when the picked provider fails, the draw is repeated among
the providers not yet tried.
"""

from __future__ import annotations

import logging
import numbers
import random
from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ConfigurationError

from .base import ChannelSender, send_with

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from comms_sdk.core.schemas import ProviderSendResult
    from comms_sdk.providers.base import Provider

logger = logging.getLogger(__name__)


def _weight(provider: Provider) -> float:
    return getattr(provider, "weight", None)  # type: ignore[return-value]


def select_weighted_provider(
    providers: Sequence[Provider],
    rng: random.Random | None = None,
) -> Provider:
    """Draw one provider proportionally to its weight.

    Falls back to the first provider when no provider has a positive weight.
    """
    candidates = [p for p in providers if _weight(p) > 0]
    if not candidates:
        return providers[0]

    total = sum(_weight(p) for p in candidates)
    point = (rng or random).random() * total
    cumulative = 0.0
    for provider in candidates:
        cumulative += _weight(provider)
        if point < cumulative:
            return provider
    return candidates[-1]


def strategy_weighted(
    providers: Sequence[Provider],
    *,
    rng: random.Random | None = None,
) -> ChannelSender:
    """Send with a provider drawn by weight, retrying the draw on failure.

    Args:
        providers: Providers exposing a numeric ``weight`` attribute.
        rng: Random source, mostly for deterministic tests.

    Raises:
        ConfigurationError: If ``providers`` is empty or a weight is missing,
            non-numeric or negative.
    """
    if not providers:
        msg = "Weighted strategy requires at least one provider"
        raise ConfigurationError(msg, "WEIGHTED_REQUIRES_PROVIDER")

    for provider in providers:
        weight = getattr(provider, "weight", None)
        if (
            not isinstance(weight, numbers.Real)
            or isinstance(weight, bool)
            or weight < 0
        ):
            msg = f'Provider "{provider.id}" must have a non-negative weight. Got: {weight}'
            raise ConfigurationError(msg, "WEIGHTED_INVALID_WEIGHT")

    pool = tuple(providers)

    async def send(request: Mapping[str, Any]) -> ProviderSendResult:
        remaining = list(pool)
        while True:
            selected = select_weighted_provider(remaining, rng)
            try:
                return await send_with(selected, request)
            except Exception as e:
                remaining = [p for p in remaining if p is not selected]
                if not remaining:
                    raise
                logger.warning(
                    f"Provider {selected.id} failed, drawing among {len(remaining)} remaining: {e}",
                    extra={"provider_id": selected.id},
                )

    return send
