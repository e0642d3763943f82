"""Unit tests for strategy name resolution."""

from __future__ import annotations

import pytest

from comms_sdk.core.config import ChannelConfig
from comms_sdk.core.exceptions import ConfigurationError
from comms_sdk.strategies import (
    STRATEGIES,
    build_strategies,
    resolve_strategy,
    strategy_fallback,
    strategy_roundrobin,
)


@pytest.mark.unit
class TestResolveStrategy:
    """Test suite for resolve_strategy."""

    @pytest.mark.parametrize("name", ["fallback", "no-fallback", "roundrobin", "weighted"])
    def test_builtin_names(self, name):
        assert resolve_strategy(name, "sms") is STRATEGIES[name]

    def test_callable_is_used_as_is(self):
        def custom(providers):
            return strategy_fallback(providers)

        assert resolve_strategy(custom, "sms") is custom

    def test_missing_strategy(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_strategy(None, "sms")

        assert exc_info.value.code == "MISSING_STRATEGY"

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_strategy("random", "sms")

        assert exc_info.value.code == "UNKNOWN_STRATEGY"
        assert "sms" in str(exc_info.value)

    def test_build_strategies(self):
        strategies = build_strategies(
            {
                "sms": ChannelConfig(multi_provider_strategy="roundrobin"),
                "email": ChannelConfig(),
            }
        )

        assert strategies == {"sms": strategy_roundrobin, "email": strategy_fallback}
