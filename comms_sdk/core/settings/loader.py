"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Testing:
    In tests, clear the cache to force reload:
    get_comms_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .comms import CommsSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_comms_settings() -> CommsSettings:
    """Get cached SDK settings.

    Returns:
        Validated and frozen CommsSettings instance.
    """
    return CommsSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()
