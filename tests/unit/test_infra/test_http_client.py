"""Unit tests for the vendor HTTP helper."""

from __future__ import annotations

import json

import httpx
import pytest

from comms_sdk.core.exceptions import NetworkError, RequestError
from comms_sdk.infra.http import request
from comms_sdk.utils.retry import RetryOptions

FAST_RETRY = RetryOptions(max_retries=2, base_delay=0.001, max_delay=0.01, jitter=False)


class RecordingTransport(httpx.MockTransport):
    """Mock transport answering with scripted status codes."""

    def __init__(self, statuses: list[int], body: dict | None = None) -> None:
        self.statuses = list(statuses)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)
        self.body = body or {"ok": True}

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return httpx.Response(status, json=self.body)


@pytest.mark.unit
class TestRequest:
    """Test suite for the request helper."""

    @pytest.mark.asyncio
    async def test_sends_json_and_user_agent(self):
        transport = RecordingTransport([200])

        response = await request(
            "https://api.example.com/send",
            "POST",
            json={"to": "x"},
            headers={"Authorization": "Bearer k"},
            transport=transport,
        )

        sent = transport.requests[0]
        assert response.status_code == 200
        assert sent.method == "POST"
        assert sent.headers["Authorization"] == "Bearer k"
        assert sent.headers["User-Agent"].startswith("comms-sdk/")
        assert json.loads(sent.content) == {"to": "x"}

    @pytest.mark.asyncio
    async def test_non_2xx_raises_request_error(self):
        transport = RecordingTransport([401])

        with pytest.raises(RequestError) as exc_info:
            await request("https://api.example.com/send", "POST", transport=transport)

        assert exc_info.value.status_code == 401
        assert exc_info.value.response.status_code == 401

    @pytest.mark.asyncio
    async def test_throw_on_error_disabled_returns_response(self):
        response = await request(
            "https://api.example.com/send",
            "POST",
            throw_on_error=False,
            transport=RecordingTransport([500]),
        )

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_network_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            await request("https://api.example.com", transport=httpx.MockTransport(refuse))

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_safe_method_is_retried(self):
        transport = RecordingTransport([503, 200])

        response = await request("https://api.example.com/status", retry=FAST_RETRY, transport=transport)

        assert response.status_code == 200
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_unsafe_method_is_not_retried_by_default(self):
        transport = RecordingTransport([503, 200])

        with pytest.raises(RequestError):
            await request("https://api.example.com/send", "POST", retry=FAST_RETRY, transport=transport)

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_unsafe_method_retried_with_explicit_predicate(self):
        transport = RecordingTransport([503, 200])
        options = RetryOptions(
            max_retries=2,
            base_delay=0.001,
            jitter=False,
            should_retry=lambda context: context.status_code == 503,
        )

        response = await request("https://api.example.com/send", "POST", retry=options, transport=transport)

        assert response.status_code == 200
        assert len(transport.requests) == 2
