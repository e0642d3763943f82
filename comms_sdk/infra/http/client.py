"""HTTP helper shared by every vendor provider.

Wraps :mod:`httpx` with the SDK's conventions: proxy and User-Agent from
settings, ``RequestError`` for non-2xx responses, and opt-in retries that
never replay unsafe methods unless the caller explicitly decides so.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import httpx

from comms_sdk.core.exceptions import NetworkError, RequestError
from comms_sdk.core.settings import get_comms_settings
from comms_sdk.utils.retry import RetryOptions, with_retry

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def _never_retry(_context: Any) -> bool:
    return False


async def request(
    url: str,
    method: str = "GET",
    *,
    headers: Mapping[str, str] | None = None,
    json: Any = None,
    data: Mapping[str, Any] | None = None,
    files: Any = None,
    params: Mapping[str, Any] | None = None,
    auth: httpx.Auth | tuple[str, str] | None = None,
    timeout: float | None = None,
    throw_on_error: bool = True,
    retry: RetryOptions | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Perform one HTTP request.

    Args:
        url: Absolute URL.
        method: HTTP method.
        headers: Extra request headers.
        json: JSON body.
        data: Form body.
        files: Multipart files, as accepted by httpx.
        params: Query parameters.
        auth: httpx auth or ``(user, password)`` for Basic auth.
        timeout: Timeout in seconds, defaults to ``COMMS_HTTP_TIMEOUT``.
        throw_on_error: Raise :class:`RequestError` for non-2xx responses.
        retry: Retry options. For methods other than GET/HEAD/OPTIONS retries
            only happen when ``retry.should_retry`` is provided.
        transport: Custom httpx transport (tests use ``httpx.MockTransport``).

    Returns:
        The httpx response.

    Raises:
        RequestError: Non-2xx status with ``throw_on_error``.
        NetworkError: Transport failure (connection refused, timeout, ...).
    """
    settings = get_comms_settings()
    method = method.upper()
    request_headers = {"User-Agent": settings.user_agent, **(headers or {})}

    client_kwargs: dict[str, Any] = {
        "timeout": timeout if timeout is not None else settings.http_timeout,
    }
    if transport is not None:
        client_kwargs["transport"] = transport
    elif settings.http_proxy:
        client_kwargs["proxy"] = settings.http_proxy

    async def execute() -> httpx.Response:
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.request(
                    method,
                    url,
                    headers=request_headers,
                    json=json,
                    data=data,
                    files=files,
                    params=params,
                    auth=auth,
                )
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {url} failed: {e}", cause=e) from e

        if throw_on_error and not response.is_success:
            logger.debug(
                f"{method} {url} returned {response.status_code}",
                extra={"status_code": response.status_code, "url": url},
            )
            raise RequestError(response.status_code, url, response)
        return response

    if retry is None:
        return await execute()

    if method not in SAFE_METHODS and retry.should_retry is None:
        retry = replace(retry, should_retry=_never_retry)
    return await with_retry(execute, retry)


__all__ = ["SAFE_METHODS", "request"]
