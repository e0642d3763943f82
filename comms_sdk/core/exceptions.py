"""Exception hierarchy for the notification SDK.

Every error raised by the SDK derives from :class:`CommsError`. Provider and
network errors carry enough context (provider id, channel, HTTP status) for the
dispatcher to attribute a failure; the aggregate result only ever keeps the
string produced by :func:`to_message`.
"""

from __future__ import annotations

from typing import Any


class CommsError(Exception):
    """Base SDK exception.

    Attributes:
        message: Human-readable error message.
        code: Machine readable error code.
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, code={self.code!r})"


class ProviderError(CommsError):
    """Raised when a vendor rejects or fails to deliver a message.

    ``provider_id`` may be assigned after construction: strategies stamp the id
    of the provider whose failure is surfaced to the dispatcher.

    Example:
        raise ProviderError(
            "Mailgun responded with 401",
            provider_id="email-mailgun-provider",
            channel="email",
            code="PROVIDER_REJECTED",
            status_code=401,
        )
    """

    def __init__(
        self,
        message: str,
        provider_id: str | None = None,
        channel: str | None = None,
        code: str | None = "PROVIDER_ERROR",
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)
        self.provider_id = provider_id
        self.channel = channel
        self.status_code = status_code


class ConfigurationError(CommsError):
    """Raised for invalid SDK configuration at construction time."""

    def __init__(
        self,
        message: str,
        code: str = "CONFIGURATION_ERROR",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)


class ValidationError(CommsError):
    """Raised when a channel request is missing required data."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class NetworkError(CommsError):
    """Raised for transport level and HTTP failures."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code="NETWORK_ERROR", cause=cause)
        self.status_code = status_code
        self.response = response


class RequestError(NetworkError):
    """Raised by the HTTP helper when a response has a non-2xx status."""

    def __init__(self, status_code: int, url: str, response: Any = None) -> None:
        super().__init__(
            f"Request to {url} failed with status {status_code}",
            status_code=status_code,
            response=response,
        )
        self.url = url


class RetryCancelledError(CommsError):
    """Raised when a retry loop is cancelled through its signal."""

    def __init__(self, message: str = "Retry cancelled") -> None:
        super().__init__(message, code="RETRY_CANCELLED")


def is_comms_error(error: object) -> bool:
    """Return True if ``error`` is an SDK error."""
    return isinstance(error, CommsError)


def is_provider_error(error: object) -> bool:
    """Return True if ``error`` is a :class:`ProviderError`."""
    return isinstance(error, ProviderError)


def to_message(error: object) -> str:
    """Convert any raised value into the string kept in aggregate results.

    Args:
        error: Exception or arbitrary value that was raised/rejected.

    Returns:
        The exception message, the exception class name when the message is
        empty, or ``str(error)`` for non-exception values.
    """
    if isinstance(error, BaseException):
        message = str(error)
        return message or type(error).__name__
    return str(error)


__all__ = [
    "CommsError",
    "ConfigurationError",
    "NetworkError",
    "ProviderError",
    "RequestError",
    "RetryCancelledError",
    "ValidationError",
    "is_comms_error",
    "is_provider_error",
    "to_message",
]
