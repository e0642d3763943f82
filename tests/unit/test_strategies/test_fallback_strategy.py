"""Unit tests for the fallback and no-fallback strategies."""

from __future__ import annotations

import pytest

from comms_sdk.core.exceptions import ConfigurationError, ProviderError
from comms_sdk.strategies import strategy_fallback, strategy_no_fallback


@pytest.mark.unit
class TestFallbackStrategy:
    """Test suite for strategy_fallback."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, make_provider, call_log):
        a = make_provider("a", ["id-a"], calls=call_log)
        b = make_provider("b", ["id-b"], calls=call_log)

        result = await strategy_fallback([a, b])({"text": "hi"})

        assert result.id == "id-a"
        assert result.provider_id == "a"
        assert call_log == ["a"]

    @pytest.mark.asyncio
    async def test_fails_over_in_configured_order(self, make_provider, call_log):
        a = make_provider("a", [ProviderError("down")], calls=call_log)
        b = make_provider("b", ["id-b"], calls=call_log)
        send = strategy_fallback([a, b])

        for _ in range(3):
            result = await send({"text": "hi"})
            assert result.provider_id == "b"

        assert call_log == ["a", "b"] * 3

    @pytest.mark.asyncio
    async def test_all_failing_raises_last_error_attributed(self, make_provider):
        first = ProviderError("a down")
        last = ProviderError("b down")
        a = make_provider("a", [first])
        b = make_provider("b", [last])

        with pytest.raises(ProviderError) as exc_info:
            await strategy_fallback([a, b])({})

        assert exc_info.value is last
        assert exc_info.value.provider_id == "b"

    @pytest.mark.asyncio
    async def test_non_sdk_errors_are_attributed(self, make_provider):
        a = make_provider("a", [RuntimeError("boom")])

        with pytest.raises(RuntimeError) as exc_info:
            await strategy_fallback([a])({})

        assert exc_info.value.provider_id == "a"

    @pytest.mark.asyncio
    async def test_request_is_passed_unchanged(self, make_provider):
        a = make_provider("a")

        await strategy_fallback([a])({"to": "+15551234567", "text": "hi"})

        assert a.requests == [{"to": "+15551234567", "text": "hi"}]

    def test_empty_provider_list_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            strategy_fallback([])

        assert exc_info.value.code == "FALLBACK_REQUIRES_PROVIDER"


@pytest.mark.unit
class TestNoFallbackStrategy:
    """Test suite for strategy_no_fallback."""

    @pytest.mark.asyncio
    async def test_always_uses_first_provider(self, make_provider, call_log):
        a = make_provider("a", ["id-a"], calls=call_log)
        b = make_provider("b", ["id-b"], calls=call_log)
        send = strategy_no_fallback([a, b])

        await send({})
        result = await send({})

        assert result.provider_id == "a"
        assert call_log == ["a", "a"]

    @pytest.mark.asyncio
    async def test_failure_never_reaches_second_provider(self, make_provider, call_log):
        error = ProviderError("down")
        a = make_provider("a", [error], calls=call_log)
        b = make_provider("b", calls=call_log)

        with pytest.raises(ProviderError) as exc_info:
            await strategy_no_fallback([a, b])({})

        assert exc_info.value is error
        assert exc_info.value.provider_id == "a"
        assert call_log == ["a"]

    def test_empty_provider_list_rejected(self):
        with pytest.raises(ConfigurationError):
            strategy_no_fallback([])
