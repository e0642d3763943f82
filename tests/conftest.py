"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings isolated from the developer's shell and .env
    - State Fixtures: process-wide caches reset between tests
    - Provider Fixtures: scripted in-memory providers
    - HTTP Fixtures: httpx responses for patched vendor calls
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from typing import Any

import httpx
import pytest

# Ensure tests never reach real vendors or a local catcher by accident
os.environ["COMMS_USE_NOTIFICATION_CATCHER"] = "false"
os.environ.setdefault("COMMS_CATCHER_HOST", "localhost")
os.environ.setdefault("COMMS_CATCHER_PORT", "1025")
os.environ["COMMS_HTTP_PROXY"] = ""
os.environ.setdefault("LOG_LEVEL", "DEBUG")


# ============================================================================
# State Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_process_state():
    """Clear cached settings and shared singletons around every test."""
    from comms_sdk.core.settings import get_comms_settings, get_logging_settings
    from comms_sdk.infra.logging import clear_log_context
    from comms_sdk.utils.registry import Registry

    get_comms_settings.cache_clear()
    get_logging_settings.cache_clear()
    Registry.clear()
    clear_log_context()
    yield
    get_comms_settings.cache_clear()
    get_logging_settings.cache_clear()
    Registry.clear()
    clear_log_context()


# ============================================================================
# Provider Fixtures
# ============================================================================


class ScriptedProvider:
    """In-memory provider replaying a script of outcomes.

    Each call consumes the next outcome: a string is returned as the message
    id, an exception instance is raised. The last outcome repeats once the
    script is exhausted.
    """

    def __init__(
        self,
        id: str,
        outcomes: Iterable[str | BaseException] = ("msg-1",),
        *,
        weight: float | None = None,
        calls: list[str] | None = None,
    ) -> None:
        self.id = id
        self.weight = weight
        self._outcomes = list(outcomes)
        self.requests: list[dict[str, Any]] = []
        self.calls = calls if calls is not None else []

    async def send(self, request: Any) -> str:
        self.requests.append(dict(request))
        self.calls.append(self.id)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def make_provider() -> Callable[..., ScriptedProvider]:
    """Factory fixture building :class:`ScriptedProvider` instances.

    Example:
        def test_fallback(make_provider):
            failing = make_provider("a", [ProviderError("down")])
    """
    return ScriptedProvider


@pytest.fixture
def call_log() -> list[str]:
    """Shared list recording provider ids in call order."""
    return []


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def json_response() -> Callable[..., httpx.Response]:
    """Build an httpx response with a JSON body."""

    def build(status_code: int = 200, body: Any = None) -> httpx.Response:
        return httpx.Response(status_code, json=body if body is not None else {})

    return build
