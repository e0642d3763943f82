"""Provider capability and shared base class.

A provider is anything with an ``id`` and an async ``send(request) -> str``
returning the vendor message id. Built-in providers derive from
:class:`BaseProvider`, which wraps the vendor call (``_do_send``) with:

- ``customize`` hook application on a private copy of the request
- optional retries through :func:`comms_sdk.utils.retry.with_retry`
- timing, logging and Prometheus metrics
- error attribution: every failure surfaces as a :class:`ProviderError`
  carrying this provider's id and channel

Usage:
    class MyProvider(BaseProvider):
        provider_type = "my"

        async def _do_send(self, request: dict[str, Any]) -> str:
            ...
"""

from __future__ import annotations

import copy
import inspect
import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from comms_sdk.core.exceptions import CommsError, ProviderError, RetryCancelledError, ValidationError
from comms_sdk.infra.logging import get_logger
from comms_sdk.infra.metrics import track_provider_send
from comms_sdk.utils.retry import RetryOptions, extract_status_code, with_retry

if TYPE_CHECKING:
    from collections.abc import Mapping

    from comms_sdk.core.schemas import ChannelRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class Provider(Protocol):
    """Capability consumed by strategies."""

    id: str

    async def send(self, request: Mapping[str, Any]) -> str:
        """Send one channel request and return the vendor message id."""
        ...


class RetryConfig(BaseModel):
    """Retry section of a provider configuration (delays in seconds)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=30.0, ge=0)
    jitter: bool = True
    max_jitter: float = Field(default=1.0, ge=0)
    retryable_status_codes: tuple[int, ...] | None = None

    def to_options(self) -> RetryOptions:
        options: dict[str, Any] = {
            "max_retries": self.max_retries,
            "base_delay": self.base_delay,
            "max_delay": self.max_delay,
            "jitter": self.jitter,
            "max_jitter": self.max_jitter,
        }
        if self.retryable_status_codes is not None:
            options["retryable_status_codes"] = self.retryable_status_codes
        return RetryOptions(**options)


class ProviderConfig(BaseModel):
    """Options shared by every provider configuration.

    Keys are accepted in camelCase (``apiKey``) or snake_case (``api_key``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    type: str | None = None
    id: str | None = None
    weight: float | None = Field(default=None, ge=0)
    retry: RetryConfig | None = None


class BaseProvider(ABC):
    """Abstract base class for built-in providers.

    Subclasses set ``provider_type`` (used for the default id
    ``{channel}-{provider_type}-provider``), optionally ``config_model`` and
    ``request_model``, and implement ``_do_send``.
    """

    provider_type: ClassVar[str]
    config_model: ClassVar[type[ProviderConfig]] = ProviderConfig
    request_model: ClassVar[type[ChannelRequest] | None] = None

    def __init__(self, channel: str, config: ProviderConfig | None = None) -> None:
        self.channel = channel
        self.config = config if config is not None else self.config_model()
        self.id: str = self.config.id or f"{channel}-{self.provider_type}-provider"
        self.weight = self.config.weight
        self.retry_options = self.config.retry.to_options() if self.config.retry else None
        self._logger = get_logger(__name__, channel=channel, provider_id=self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"

    @abstractmethod
    async def _do_send(self, request: dict[str, Any]) -> str:
        """Perform one vendor call and return the vendor message id."""
        ...

    def parse_request(self, request: Mapping[str, Any]) -> Any:
        """Validate ``request`` against ``request_model``.

        Raises:
            ValidationError: If a required field is missing or malformed.
        """
        if self.request_model is None:
            return request
        try:
            return self.request_model.model_validate(request)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            msg = f"Invalid {self.channel} request for {self.id}: {field} {first.get('msg', '')}".strip()
            raise ValidationError(msg, field=field or None) from e

    async def customize(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Return a private copy of ``request`` with its ``customize`` hook applied.

        The hook receives ``(provider_id, request)`` and may be sync or async.
        The caller's request object is never modified.
        """
        data = {key: value for key, value in request.items() if key != "customize"}
        data = copy.deepcopy(data)
        hook = request.get("customize")
        if hook is None:
            return data
        result = hook(self.id, data)
        if inspect.isawaitable(result):
            result = await result
        return {key: value for key, value in dict(result).items() if key != "customize"}

    async def send(self, request: Mapping[str, Any]) -> str:
        """Send a channel request with timing, logging and error attribution.

        Returns:
            The vendor message id.

        Raises:
            ProviderError: On any failure, with ``provider_id`` and ``channel`` set.
            RetryCancelledError: If the retry signal is set; never wrapped.
        """
        start_time = time.perf_counter()
        try:
            payload = await self.customize(request)
            if self.retry_options is not None:
                message_id = await with_retry(lambda: self._do_send(payload), self.retry_options)
            else:
                message_id = await self._do_send(payload)
        except RetryCancelledError:
            duration = time.perf_counter() - start_time
            track_provider_send(self.channel, self.id, success=False, duration=duration)
            self._logger.warning(f"Send via {self.id} cancelled during retries")
            raise
        except Exception as e:
            duration = time.perf_counter() - start_time
            track_provider_send(self.channel, self.id, success=False, duration=duration)
            error = self._as_provider_error(e)
            self._logger.warning(
                f"Send failed via {self.id}: {error}",
                extra={"error_code": error.code, "status_code": error.status_code},
            )
            if error is e:
                raise
            raise error from e

        duration = time.perf_counter() - start_time
        track_provider_send(self.channel, self.id, success=True, duration=duration)
        self._logger.info(
            f"Sent via {self.id}",
            extra={"message_id": message_id, "duration_ms": int(duration * 1000)},
        )
        return message_id

    def _as_provider_error(self, error: Exception) -> ProviderError:
        if isinstance(error, ProviderError):
            if error.provider_id is None:
                error.provider_id = self.id
            if error.channel is None:
                error.channel = self.channel
            return error
        code = error.code if isinstance(error, CommsError) else "SEND_FAILED"
        return ProviderError(
            str(error) or type(error).__name__,
            provider_id=self.id,
            channel=self.channel,
            code=code,
            status_code=extract_status_code(error),
            cause=error,
        )


__all__ = ["BaseProvider", "Provider", "ProviderConfig", "RetryConfig"]
