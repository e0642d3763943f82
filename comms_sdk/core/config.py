"""SDK configuration model.

Example:
    config = CommsSdkConfig.model_validate(
        {
            "channels": {
                "email": {
                    "providers": [
                        {"type": "sendgrid", "apiKey": "SG.xxx"},
                        {"type": "smtp", "host": "smtp.example.com"},
                    ],
                    "multiProviderStrategy": "fallback",
                },
            },
        }
    )
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Standard channels, always present on an SDK instance.
CHANNELS: tuple[str, ...] = (
    "email",
    "push",
    "sms",
    "voice",
    "webpush",
    "slack",
    "whatsapp",
    "telegram",
)

DEFAULT_STRATEGY = "fallback"
CATCHER_PROVIDER_TYPE = "notificationcatcher"
CATCHER_STRATEGY = "no-fallback"


class ChannelConfig(BaseModel):
    """Providers and selection strategy of one channel.

    ``providers`` holds provider configurations (mappings with a ``type`` key)
    or ready-made provider objects exposing ``id`` and an async ``send``.
    ``multi_provider_strategy`` is a strategy name or a strategy callable.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    providers: list[Any] = Field(default_factory=list)
    multi_provider_strategy: Any = Field(default=DEFAULT_STRATEGY, alias="multiProviderStrategy")


class CommsSdkConfig(BaseModel):
    """Top-level SDK configuration."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    channels: dict[str, ChannelConfig] = Field(default_factory=dict)
    use_notification_catcher: bool = Field(default=False, alias="useNotificationCatcher")


def notification_catcher_config(channels: tuple[str, ...] = CHANNELS) -> dict[str, ChannelConfig]:
    """Route every standard channel to the notification catcher."""
    return {
        channel: ChannelConfig(
            providers=[{"type": CATCHER_PROVIDER_TYPE}],
            multi_provider_strategy=CATCHER_STRATEGY,
        )
        for channel in channels
    }


def merge_with_default_config(config: CommsSdkConfig) -> CommsSdkConfig:
    """Fill in every standard channel and apply notification catcher mode.

    Standard channels missing from ``config`` get no providers and the
    ``fallback`` strategy; custom channel names are kept as given. In catcher
    mode every standard channel is replaced by the catcher configuration and
    custom channels are dropped.
    """
    if config.use_notification_catcher:
        return CommsSdkConfig(
            channels=notification_catcher_config(),
            use_notification_catcher=True,
        )

    channels: dict[str, ChannelConfig] = {
        channel: config.channels.get(channel) or ChannelConfig() for channel in CHANNELS
    }
    for name, channel_config in config.channels.items():
        if name not in channels:
            channels[name] = channel_config
    return CommsSdkConfig(channels=channels, use_notification_catcher=False)


__all__ = [
    "CATCHER_PROVIDER_TYPE",
    "CATCHER_STRATEGY",
    "CHANNELS",
    "DEFAULT_STRATEGY",
    "ChannelConfig",
    "CommsSdkConfig",
    "merge_with_default_config",
    "notification_catcher_config",
]
