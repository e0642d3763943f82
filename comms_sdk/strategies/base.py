"""Shared types and helpers for provider selection strategies."""

from __future__ import annotations

import contextlib
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from comms_sdk.core.schemas import ProviderSendResult

if TYPE_CHECKING:
    from comms_sdk.providers.base import Provider

ChannelSender = Callable[[Mapping[str, Any]], Awaitable[ProviderSendResult]]
"""Send function produced by a strategy for one channel."""

Strategy = Callable[[Sequence["Provider"]], ChannelSender]
"""A strategy turns a provider list into a :data:`ChannelSender`."""


def attach_provider_id(error: BaseException, provider_id: str) -> None:
    """Stamp the id of the provider whose failure is being propagated."""
    with contextlib.suppress(AttributeError):
        error.provider_id = provider_id  # type: ignore[attr-defined]


async def send_with(provider: Provider, request: Mapping[str, Any]) -> ProviderSendResult:
    """Make one attempt with ``provider``, attributing any failure to it."""
    try:
        message_id = await provider.send(request)
    except Exception as e:
        attach_provider_id(e, provider.id)
        raise
    return ProviderSendResult(id=message_id, provider_id=provider.id)
