"""Unit tests for the provider base class."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from comms_sdk.core.exceptions import ProviderError, RetryCancelledError, ValidationError
from comms_sdk.core.schemas import SmsRequest
from comms_sdk.providers import BaseProvider, Provider, ProviderConfig
from comms_sdk.utils.retry import RetryOptions


class EchoProvider(BaseProvider):
    """Provider recording payloads and replaying scripted failures."""

    provider_type = "echo"
    request_model = SmsRequest

    def __init__(self, channel: str = "sms", config: ProviderConfig | None = None, failures: list[Exception] | None = None) -> None:
        super().__init__(channel, config)
        self.failures = list(failures or [])
        self.payloads: list[dict[str, Any]] = []

    async def _do_send(self, request: dict[str, Any]) -> str:
        self.payloads.append(request)
        if self.failures:
            raise self.failures.pop(0)
        return f"msg-{len(self.payloads)}"


SMS = {"from": "Acme", "to": "+15551234567", "text": "Hello"}


@pytest.mark.unit
class TestBaseProviderIdentity:
    """Test suite for provider identity and configuration."""

    def test_default_id(self):
        assert EchoProvider("sms").id == "sms-echo-provider"

    def test_configured_id_and_weight(self):
        provider = EchoProvider("sms", ProviderConfig(id="primary", weight=3))

        assert provider.id == "primary"
        assert provider.weight == 3

    def test_satisfies_provider_protocol(self):
        assert isinstance(EchoProvider(), Provider)

    def test_parse_request_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            EchoProvider().parse_request({"from": "Acme", "text": "Hello"})

        assert exc_info.value.field == "to"


@pytest.mark.unit
class TestCustomize:
    """Test suite for the customize hook."""

    @pytest.mark.asyncio
    async def test_sync_hook_receives_provider_id(self):
        provider = EchoProvider()
        seen = []

        def customize(provider_id, request):
            seen.append(provider_id)
            return {**request, "text": "Customized"}

        await provider.send({**SMS, "customize": customize})

        assert seen == ["sms-echo-provider"]
        assert provider.payloads[0]["text"] == "Customized"
        assert "customize" not in provider.payloads[0]

    @pytest.mark.asyncio
    async def test_async_hook(self):
        provider = EchoProvider()

        async def customize(provider_id, request):
            return {**request, "to": "+15550000000"}

        await provider.send({**SMS, "customize": customize})

        assert provider.payloads[0]["to"] == "+15550000000"

    @pytest.mark.asyncio
    async def test_caller_request_is_never_modified(self):
        provider = EchoProvider()
        request = {**SMS, "meta": {"tags": ["a"]}}

        def customize(provider_id, data):
            data["meta"]["tags"].append("b")
            data["text"] = "changed"
            return data

        await provider.send({**request, "customize": customize})

        assert request == {**SMS, "meta": {"tags": ["a"]}}


@pytest.mark.unit
class TestSendErrors:
    """Test suite for error attribution and retries."""

    @pytest.mark.asyncio
    async def test_provider_error_gets_attribution(self):
        provider = EchoProvider(failures=[ProviderError("rejected", code="API_ERROR")])

        with pytest.raises(ProviderError) as exc_info:
            await provider.send(SMS)

        assert exc_info.value.provider_id == "sms-echo-provider"
        assert exc_info.value.channel == "sms"
        assert exc_info.value.code == "API_ERROR"

    @pytest.mark.asyncio
    async def test_foreign_errors_are_wrapped(self):
        cause = RuntimeError("socket closed")
        provider = EchoProvider(failures=[cause])

        with pytest.raises(ProviderError) as exc_info:
            await provider.send(SMS)

        assert exc_info.value.cause is cause
        assert exc_info.value.code == "SEND_FAILED"
        assert str(exc_info.value) == "socket closed"

    @pytest.mark.asyncio
    async def test_retry_config_retries_transient_failures(self):
        config = ProviderConfig.model_validate(
            {"retry": {"maxRetries": 2, "baseDelay": 0.001, "jitter": False}}
        )
        provider = EchoProvider(
            config=config,
            failures=[ProviderError("busy", status_code=503), ProviderError("busy", status_code=503)],
        )

        assert await provider.send(SMS) == "msg-3"
        assert len(provider.payloads) == 3

    @pytest.mark.asyncio
    async def test_without_retry_config_single_attempt(self):
        provider = EchoProvider(failures=[ProviderError("busy", status_code=503)])

        with pytest.raises(ProviderError):
            await provider.send(SMS)

        assert len(provider.payloads) == 1

    @pytest.mark.asyncio
    async def test_retry_cancellation_is_not_wrapped(self):
        signal = asyncio.Event()
        signal.set()
        provider = EchoProvider()
        provider.retry_options = RetryOptions(signal=signal)

        with pytest.raises(RetryCancelledError):
            await provider.send(SMS)

        assert provider.payloads == []
