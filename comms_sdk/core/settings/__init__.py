"""Pydantic Settings v2 configuration for the SDK.

Import settings via cached loaders:
    from comms_sdk.core.settings import get_comms_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .comms import CommsSettings
from .loader import get_comms_settings, get_logging_settings
from .logs import LoggingSettings

__all__ = [
    "CommsSettings",
    "LoggingSettings",
    "get_comms_settings",
    "get_logging_settings",
]
