"""Process-wide registry of lazily created singletons.

Used for objects that must be shared across every Sender in the process, such
as the per-channel logger providers used when a channel has no provider.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class Registry:
    """Keyed singleton store.

    Example:
        provider = Registry.get_instance("email-logger-default", lambda: LoggerProvider("email"))
    """

    _instances: ClassVar[dict[str, Any]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_instance(cls, key: str, factory: Callable[[], T]) -> T:
        """Return the instance stored under ``key``, creating it on first use."""
        with cls._lock:
            if key not in cls._instances:
                cls._instances[key] = factory()
            return cls._instances[key]

    @classmethod
    def clear(cls) -> None:
        """Forget every instance (intended for tests)."""
        with cls._lock:
            cls._instances.clear()


__all__ = ["Registry"]
