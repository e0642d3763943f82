"""Notification providers and the factory that builds them from configuration."""

from __future__ import annotations

from .base import BaseProvider, Provider, ProviderConfig, RetryConfig
from .catcher import NotificationCatcherProvider
from .custom import CustomProvider, CustomProviderConfig
from .factory import ProviderFactory, get_provider_factory
from .logger import LoggerProvider

__all__ = [
    "BaseProvider",
    "CustomProvider",
    "CustomProviderConfig",
    "LoggerProvider",
    "NotificationCatcherProvider",
    "Provider",
    "ProviderConfig",
    "ProviderFactory",
    "RetryConfig",
    "get_provider_factory",
]
