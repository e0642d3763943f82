"""SDK entry point wiring configuration, providers, strategies and the dispatcher."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from comms_sdk.core.config import CHANNELS, CommsSdkConfig, merge_with_default_config
from comms_sdk.core.exceptions import ConfigurationError
from comms_sdk.core.settings import get_comms_settings
from comms_sdk.providers import get_provider_factory
from comms_sdk.sender import Sender
from comms_sdk.strategies import build_strategies

if TYPE_CHECKING:
    from comms_sdk.core.schemas import NotificationRequest, NotificationStatus
    from comms_sdk.providers import ProviderFactory

logger = logging.getLogger(__name__)


def load_config(config: CommsSdkConfig | Mapping[str, Any] | None = None, **overrides: Any) -> CommsSdkConfig:
    """Validate user configuration and merge it with the defaults.

    ``COMMS_USE_NOTIFICATION_CATCHER`` applies when the configuration does not
    set ``useNotificationCatcher`` itself.

    Raises:
        ConfigurationError: If the configuration does not validate.
    """
    if isinstance(config, CommsSdkConfig):
        data: dict[str, Any] = {
            name: getattr(config, name) for name in config.model_fields_set
        }
    else:
        data = dict(config or {})
    data.update(overrides)

    try:
        parsed = CommsSdkConfig.model_validate(data)
    except pydantic.ValidationError as e:
        msg = f"Invalid SDK configuration: {e}"
        raise ConfigurationError(msg, "INVALID_CONFIG", cause=e) from e

    if "use_notification_catcher" not in parsed.model_fields_set:
        parsed = parsed.model_copy(
            update={"use_notification_catcher": get_comms_settings().use_notification_catcher}
        )
    return merge_with_default_config(parsed)


class CommsSdk:
    """Send one notification across several channels.

    Args:
        config: SDK configuration, as a :class:`CommsSdkConfig` or a mapping
            in its camelCase wire form.
        factory: Provider factory; defaults to the process-wide one.
        **overrides: Top-level configuration keys applied over ``config``.

    Raises:
        ConfigurationError: On invalid configuration, unknown provider types
            or strategies.

    Example:
        sdk = CommsSdk(
            {
                "channels": {
                    "email": {"providers": [{"type": "smtp", "host": "localhost", "port": 1025}]},
                    "sms": {
                        "providers": [
                            {"type": "twilio", "accountSid": "AC...", "authToken": "..."},
                            {"type": "nexmo", "apiKey": "...", "apiSecret": "..."},
                        ],
                        "multiProviderStrategy": "roundrobin",
                    },
                },
            }
        )
        status = await sdk.send({"sms": {"from": "Acme", "to": "+15551234567", "text": "Hi"}})
    """

    def __init__(
        self,
        config: CommsSdkConfig | Mapping[str, Any] | None = None,
        *,
        factory: ProviderFactory | None = None,
        **overrides: Any,
    ) -> None:
        self.config = load_config(config, **overrides)
        factory = factory or get_provider_factory()

        providers = factory.build(self.config.channels)
        strategies = build_strategies(self.config.channels)
        channels = list(dict.fromkeys([*CHANNELS, *providers]))

        self.sender = Sender(channels=channels, providers=providers, strategies=strategies)
        logger.info(
            "Notification SDK initialized",
            extra={
                "channels": channels,
                "notification_catcher": self.config.use_notification_catcher,
                "providers": {
                    channel: [provider.id for provider in items]
                    for channel, items in providers.items()
                    if items
                },
            },
        )

    @property
    def channels(self) -> tuple[str, ...]:
        """Every channel this SDK accepts, standard ones first."""
        return self.sender.channels

    async def send(self, request: NotificationRequest) -> NotificationStatus:
        """Dispatch ``request`` on every channel it names.

        Returns:
            The aggregate status. Channel failures are reported in ``errors``,
            never raised.
        """
        return await self.sender.send(request)


__all__ = ["CommsSdk", "load_config"]
