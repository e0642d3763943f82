"""Unit tests for the provider factory."""

from __future__ import annotations

import pytest

from comms_sdk.core.config import ChannelConfig
from comms_sdk.core.exceptions import ConfigurationError
from comms_sdk.providers import (
    CustomProvider,
    LoggerProvider,
    NotificationCatcherProvider,
    ProviderFactory,
    get_provider_factory,
)
from comms_sdk.providers.email import SendgridProvider, SmtpProvider
from comms_sdk.providers.telegram import TelegramBotProvider


@pytest.fixture
def factory():
    return ProviderFactory()


@pytest.mark.unit
class TestProviderFactory:
    """Test suite for ProviderFactory."""

    def test_creates_vendor_provider_from_camel_case_config(self, factory):
        provider = factory.create("email", {"type": "sendgrid", "apiKey": "SG.key", "id": "primary", "weight": 2})

        assert isinstance(provider, SendgridProvider)
        assert provider.id == "primary"
        assert provider.weight == 2
        assert provider.config.api_key == "SG.key"

    def test_universal_types_on_any_channel(self, factory):
        assert isinstance(factory.create("pager", {"type": "logger"}), LoggerProvider)
        custom = factory.create("pager", {"type": "custom", "id": "pager-1", "send": lambda request: "ok"})
        assert isinstance(custom, CustomProvider)

    def test_catcher_on_standard_channels(self, factory):
        assert isinstance(factory.create("sms", {"type": "notificationcatcher"}), NotificationCatcherProvider)
        assert not factory.is_available("pager", "notificationcatcher")

    def test_telegram_type_name(self, factory):
        assert isinstance(factory.create("telegram", {"type": "telegram-bot", "botToken": "1:a"}), TelegramBotProvider)

    def test_provider_objects_pass_through(self, factory, make_provider):
        provider = make_provider("ready-made")

        assert factory.create("sms", provider) is provider

    def test_unknown_type(self, factory):
        with pytest.raises(ConfigurationError) as exc_info:
            factory.create("sms", {"type": "sendgrid"})

        assert exc_info.value.code == "UNKNOWN_PROVIDER_TYPE"

    def test_missing_type(self, factory):
        with pytest.raises(ConfigurationError) as exc_info:
            factory.create("sms", {"apiKey": "k"})

        assert exc_info.value.code == "MISSING_PROVIDER_TYPE"

    def test_invalid_config(self, factory):
        with pytest.raises(ConfigurationError) as exc_info:
            factory.create("sms", {"type": "twilio", "accountSid": "AC1"})

        assert exc_info.value.code == "INVALID_PROVIDER_CONFIG"

    def test_register_and_unregister(self, factory):
        factory.register("pager", "smtp", SmtpProvider)

        assert "smtp" in factory.list_types("pager")
        assert factory.unregister("pager", "smtp")
        assert not factory.unregister("pager", "smtp")

    def test_build_keeps_order(self, factory):
        providers = factory.build(
            {
                "email": ChannelConfig(providers=[{"type": "logger", "id": "first"}, {"type": "logger", "id": "second"}]),
                "sms": ChannelConfig(),
            }
        )

        assert [p.id for p in providers["email"]] == ["first", "second"]
        assert providers["sms"] == []

    def test_singleton(self):
        assert get_provider_factory() is get_provider_factory()
