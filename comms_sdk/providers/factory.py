"""Provider factory.

Turns provider configurations (``{"type": "sendgrid", "apiKey": ...}``) into
provider instances for a given channel. Provider types are registered per
channel; ``logger`` and ``custom`` are available on every channel and
``notificationcatcher`` on every standard channel.

Usage:
    factory = get_provider_factory()

    provider = factory.create("email", {"type": "smtp", "host": "localhost"})
    providers = factory.build(config.channels)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from comms_sdk.core.exceptions import ConfigurationError

from .base import BaseProvider, Provider
from .catcher import RENDERERS, NotificationCatcherProvider
from .custom import CustomProvider
from .email import MailgunProvider, SendgridProvider, SmtpProvider
from .logger import LoggerProvider
from .slack import SlackWebhookProvider
from .sms import NexmoProvider, TwilioSmsProvider
from .telegram import TelegramBotProvider
from .voice import TwilioVoiceProvider
from .whatsapp import InfobipWhatsappProvider

if TYPE_CHECKING:
    from comms_sdk.core.config import ChannelConfig

logger = logging.getLogger(__name__)

BUILTIN_PROVIDERS: dict[str, dict[str, type[BaseProvider]]] = {
    "email": {
        "smtp": SmtpProvider,
        "sendgrid": SendgridProvider,
        "mailgun": MailgunProvider,
    },
    "sms": {
        "twilio": TwilioSmsProvider,
        "nexmo": NexmoProvider,
    },
    "voice": {"twilio": TwilioVoiceProvider},
    "slack": {"webhook": SlackWebhookProvider},
    "whatsapp": {"infobip": InfobipWhatsappProvider},
    "telegram": {"telegram-bot": TelegramBotProvider},
}

UNIVERSAL_PROVIDERS: dict[str, type[BaseProvider]] = {
    "logger": LoggerProvider,
    "custom": CustomProvider,
}


def _is_provider_object(value: Any) -> bool:
    return not isinstance(value, Mapping) and isinstance(getattr(value, "id", None), str) and callable(
        getattr(value, "send", None)
    )


class ProviderFactory:
    """Registry of provider classes keyed by channel and provider type.

    Example:
        factory = ProviderFactory()
        factory.register("sms", "acme", AcmeSmsProvider)
        provider = factory.create("sms", {"type": "acme", "apiKey": "..."})
    """

    def __init__(self) -> None:
        self._registry: dict[str, dict[str, type[BaseProvider]]] = {}
        self._register_builtin_providers()

    def _register_builtin_providers(self) -> None:
        for channel, providers in BUILTIN_PROVIDERS.items():
            for provider_type, provider_class in providers.items():
                self.register(channel, provider_type, provider_class)
        for channel in RENDERERS:
            self.register(channel, "notificationcatcher", NotificationCatcherProvider)

    def register(self, channel: str, provider_type: str, provider_class: type[BaseProvider]) -> None:
        """Register ``provider_class`` as ``provider_type`` on ``channel``."""
        self._registry.setdefault(channel, {})[provider_type] = provider_class
        logger.debug("Registered provider type: %s/%s", channel, provider_type)

    def unregister(self, channel: str, provider_type: str) -> bool:
        """Remove a registration.

        Returns:
            True if the type was registered on the channel and removed.
        """
        return self._registry.get(channel, {}).pop(provider_type, None) is not None

    def is_available(self, channel: str, provider_type: str) -> bool:
        return provider_type in UNIVERSAL_PROVIDERS or provider_type in self._registry.get(channel, {})

    def list_types(self, channel: str) -> list[str]:
        """List the provider types usable on ``channel``."""
        return [*self._registry.get(channel, {}), *UNIVERSAL_PROVIDERS]

    def list_channels(self) -> list[str]:
        return list(self._registry)

    def create(self, channel: str, config: Mapping[str, Any] | Provider) -> Provider:
        """Instantiate one provider.

        Ready-made provider objects (anything with a string ``id`` and a
        callable ``send``) are returned unchanged.

        Raises:
            ConfigurationError: If the type is missing or unknown for the
                channel, or the configuration does not validate.
        """
        if _is_provider_object(config):
            return config  # type: ignore[return-value]
        if not isinstance(config, Mapping):
            msg = f'Invalid provider on channel "{channel}": expected a mapping or a provider object'
            raise ConfigurationError(msg, "INVALID_PROVIDER_CONFIG")

        provider_type = config.get("type")
        if not provider_type:
            msg = f'Provider on channel "{channel}" is missing "type"'
            raise ConfigurationError(msg, "MISSING_PROVIDER_TYPE")
        if not self.is_available(channel, provider_type):
            msg = (
                f'Unknown provider type "{provider_type}" for channel "{channel}". '
                f"Available: {', '.join(self.list_types(channel))}"
            )
            raise ConfigurationError(msg, "UNKNOWN_PROVIDER_TYPE")

        provider_class = UNIVERSAL_PROVIDERS.get(provider_type) or self._registry[channel][provider_type]
        try:
            provider_config = provider_class.config_model.model_validate(dict(config))
        except pydantic.ValidationError as e:
            msg = f'Invalid "{provider_type}" provider configuration for channel "{channel}": {e}'
            raise ConfigurationError(msg, "INVALID_PROVIDER_CONFIG", cause=e) from e

        provider = provider_class(channel, provider_config)
        logger.debug(
            f"Created {provider_type} provider",
            extra={"channel": channel, "provider_id": provider.id},
        )
        return provider

    def build(self, channels: Mapping[str, ChannelConfig]) -> dict[str, list[Provider]]:
        """Instantiate the providers of every channel, keeping configured order."""
        return {
            channel: [self.create(channel, entry) for entry in channel_config.providers]
            for channel, channel_config in channels.items()
        }


# Module-level singleton
_factory: ProviderFactory | None = None


def get_provider_factory() -> ProviderFactory:
    """Return the process-wide provider factory, creating it on first use."""
    global _factory
    if _factory is None:
        _factory = ProviderFactory()
    return _factory


__all__ = [
    "BUILTIN_PROVIDERS",
    "UNIVERSAL_PROVIDERS",
    "ProviderFactory",
    "get_provider_factory",
]
