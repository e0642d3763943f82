"""Multi-channel notification SDK.

Example:
    from comms_sdk import CommsSdk

    sdk = CommsSdk({"channels": {"email": {"providers": [{"type": "smtp", "host": "localhost"}]}}})
    status = await sdk.send(
        {
            "id": "welcome-42",
            "email": {"from": "me@acme.io", "to": "you@acme.io", "subject": "Hi", "text": "Hello"},
            "sms": {"from": "Acme", "to": "+15551234567", "text": "Hello"},
        }
    )
    if status.status == "error":
        print(status.errors)
"""

from __future__ import annotations

from comms_sdk.core.config import CHANNELS, ChannelConfig, CommsSdkConfig
from comms_sdk.core.exceptions import (
    CommsError,
    ConfigurationError,
    NetworkError,
    ProviderError,
    RequestError,
    RetryCancelledError,
    ValidationError,
    to_message,
)
from comms_sdk.core.schemas import (
    ChannelStatus,
    NotificationStatus,
    get_channel_ids,
    is_error_response,
    is_success_response,
)
from comms_sdk.providers import BaseProvider, Provider, ProviderFactory, get_provider_factory
from comms_sdk.sdk import CommsSdk
from comms_sdk.sender import Sender
from comms_sdk.strategies import (
    strategy_fallback,
    strategy_no_fallback,
    strategy_roundrobin,
    strategy_weighted,
)
from comms_sdk.utils.retry import RetryOptions, with_retry

__version__ = "0.1.0"

__all__ = [
    "CHANNELS",
    "BaseProvider",
    "ChannelConfig",
    "ChannelStatus",
    "CommsError",
    "CommsSdk",
    "CommsSdkConfig",
    "ConfigurationError",
    "NetworkError",
    "NotificationStatus",
    "Provider",
    "ProviderError",
    "ProviderFactory",
    "RequestError",
    "RetryCancelledError",
    "RetryOptions",
    "Sender",
    "ValidationError",
    "__version__",
    "get_channel_ids",
    "get_provider_factory",
    "is_error_response",
    "is_success_response",
    "strategy_fallback",
    "strategy_no_fallback",
    "strategy_roundrobin",
    "strategy_weighted",
    "to_message",
    "with_retry",
]
