"""Multi-channel dispatcher.

The :class:`Sender` owns one memoized channel sender per channel (a strategy
applied to that channel's providers) and fans a notification request out to
every channel it names, concurrently. Channel failures never escape
``send``: they are folded into the aggregate :class:`NotificationStatus`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from comms_sdk.core.exceptions import ProviderError, to_message
from comms_sdk.core.schemas import (
    METADATA_KEYS,
    ChannelSendResult,
    ChannelStatus,
    NotificationStatus,
    ProviderSendResult,
)
from comms_sdk.infra.logging import clear_log_context, get_log_context, set_log_context
from comms_sdk.infra.metrics import track_channel_send, track_notification
from comms_sdk.providers.logger import LoggerProvider
from comms_sdk.strategies import strategy_no_fallback
from comms_sdk.utils.registry import Registry

if TYPE_CHECKING:
    from comms_sdk.core.schemas import NotificationRequest
    from comms_sdk.providers.base import Provider
    from comms_sdk.strategies import ChannelSender, Strategy

logger = logging.getLogger(__name__)


def default_logger_provider(channel: str) -> Provider:
    """Return the process-wide logger provider used for unconfigured channels."""
    return Registry.get_instance(f"{channel}-logger-default", lambda: LoggerProvider(channel))


class Sender:
    """Dispatch notification requests across channels.

    Args:
        channels: Every channel name the sender accepts (standard and custom).
        providers: Provider list per channel, in configured order.
        strategies: Strategy per channel. Only channels listed here get a
            channel sender; a request naming any other known channel fails on
            that channel with ``no-sender``.

    Example:
        sender = Sender(
            channels=["email", "sms"],
            providers={"email": [smtp], "sms": []},
            strategies={"email": strategy_fallback, "sms": strategy_fallback},
        )
        status = await sender.send({"email": {...}, "sms": {...}})
    """

    def __init__(
        self,
        channels: Sequence[str],
        providers: Mapping[str, Sequence[Provider]],
        strategies: Mapping[str, Strategy],
    ) -> None:
        self.channels: tuple[str, ...] = tuple(dict.fromkeys(channels))
        self._providers = {channel: tuple(items) for channel, items in providers.items()}
        self._senders: dict[str, ChannelSender] = {
            channel: self._build_channel_sender(channel, strategy)
            for channel, strategy in strategies.items()
        }

    def _build_channel_sender(self, channel: str, strategy: Strategy) -> ChannelSender:
        providers = self._providers.get(channel, ())
        if providers:
            return strategy(providers)

        fallback = strategy_no_fallback([default_logger_provider(channel)])

        async def send_with_logger(request: Mapping[str, Any]) -> ProviderSendResult:
            logger.warning(
                f'No provider registered for channel "{channel}". Using logger.',
                extra={"channel": channel},
            )
            return await fallback(request)

        return send_with_logger

    def has_sender(self, channel: str) -> bool:
        return channel in self._senders

    def requested_channels(self, request: NotificationRequest) -> list[str]:
        """Channels named in ``request`` that this sender knows, in request order."""
        return [
            key for key in request if key not in METADATA_KEYS and key in self.channels
        ]

    async def send(self, request: NotificationRequest) -> NotificationStatus:
        """Send ``request`` on every channel it names and aggregate the outcomes.

        Never raises for channel failures; check ``status`` and ``errors`` on
        the result.
        """
        notification_id = request.get("id")
        user_id = request.get("userId")
        channels = self.requested_channels(request)

        previous_context = get_log_context()
        set_log_context(notification_id=notification_id, user_id=user_id)
        try:
            results = await asyncio.gather(
                *(self._send_channel(channel, request) for channel in channels)
            )
        finally:
            clear_log_context()
            set_log_context(**previous_context)

        status = self.aggregate(results)
        track_notification(success=status.status == "success")
        logger.info(
            f"Notification dispatched on {len(channels)} channel(s): {status.status}",
            extra={
                "notification_id": notification_id,
                "channels": channels,
                "failed_channels": sorted(status.errors or {}),
            },
        )
        return status

    async def _send_channel(self, channel: str, request: NotificationRequest) -> ChannelSendResult:
        channel_sender = self._senders.get(channel)
        payload = request.get(channel)
        try:
            if channel_sender is None:
                msg = f"No sender configured for channel: {channel}"
                raise ProviderError(msg, channel=channel, code="no-sender")
            if not isinstance(payload, Mapping):
                msg = f"No request data for channel: {channel}"
                raise ProviderError(msg, channel=channel, code="no-request-data")
            result = await channel_sender(self._merge_metadata(payload, request))
            channel_result = self._success_result(channel, result)
        except Exception as e:
            provider_id = getattr(e, "provider_id", None)
            if provider_id is not None:
                provider_id = str(provider_id)
            track_channel_send(channel, success=False)
            logger.warning(
                f'Channel "{channel}" failed: {to_message(e)}',
                extra={"channel": channel, "provider_id": provider_id},
            )
            return ChannelSendResult.failure_result(channel, e, provider_id=provider_id)

        track_channel_send(channel, success=True)
        return channel_result

    @staticmethod
    def _success_result(channel: str, result: Any) -> ChannelSendResult:
        """Normalize what a channel sender returned into a successful result.

        Accepts a :class:`ProviderSendResult` or a mapping with ``id`` and
        ``providerId`` (custom strategies). Ids are coerced to ``str``.

        Raises:
            ProviderError: If the result carries no message id.
        """
        if isinstance(result, ProviderSendResult):
            message_id, provider_id = result.id, result.provider_id
        elif isinstance(result, Mapping):
            message_id = result.get("id")
            provider_id = result.get("providerId", result.get("provider_id"))
        else:
            message_id = provider_id = None

        if message_id is None:
            msg = f"Invalid send result for channel {channel}: {result!r}"
            raise ProviderError(
                msg,
                provider_id=None if provider_id is None else str(provider_id),
                channel=channel,
                code="invalid-result",
            )
        return ChannelSendResult.success_result(
            channel,
            ProviderSendResult(
                id=str(message_id),
                provider_id=None if provider_id is None else str(provider_id),  # type: ignore[arg-type]
            ),
        )

    @staticmethod
    def _merge_metadata(payload: Mapping[str, Any], request: NotificationRequest) -> dict[str, Any]:
        merged = dict(payload)
        for key in ("id", "userId"):
            if request.get(key) is not None:
                merged[key] = request[key]
        if "customize" not in merged and request.get("customize") is not None:
            merged["customize"] = request["customize"]
        return merged

    @staticmethod
    def aggregate(results: Sequence[ChannelSendResult]) -> NotificationStatus:
        """Fold per-channel results into one :class:`NotificationStatus`."""
        channels: dict[str, ChannelStatus] = {}
        errors: dict[str, str] = {}
        for result in results:
            channels[result.channel] = ChannelStatus(id=result.id, provider_id=result.provider_id)
            if not result.success:
                errors[result.channel] = to_message(result.error)
        if errors:
            return NotificationStatus(status="error", channels=channels, errors=errors)
        return NotificationStatus(status="success", channels=channels)


__all__ = ["Sender", "default_logger_provider"]
