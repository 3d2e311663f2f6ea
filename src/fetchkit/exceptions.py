"""Client-specific exceptions."""

from __future__ import annotations

from typing import Mapping


class FetchKitError(Exception):
    """Base exception for all fetchkit failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers) if headers is not None else {}
        self.cause = cause

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.status_code is None:
            return str(self.args[0])
        return f"{self.status_code}: {self.args[0]}"


class FetchKitValidationError(FetchKitError):
    """Raised when request options or query values are invalid."""


class FetchKitExpiredError(FetchKitError):
    """Raised when a request's expiration passed before an attempt could start."""


class FetchKitTransportError(FetchKitError):
    """Raised by transports when an attempt fails before a response arrives."""


class FetchKitNetworkError(FetchKitTransportError):
    """Raised for transport-level failures like DNS and TCP errors."""


class FetchKitTimeoutError(FetchKitTransportError):
    """Raised when an attempt exceeds the transport timeout."""


class FetchKitAbortedError(FetchKitTransportError):
    """Raised when an attempt is aborted through its cancel signal."""


class FetchKitRetryExhaustedError(FetchKitError):
    """Raised when the transport keeps failing and no retries remain."""


class FetchKitDecodeError(FetchKitError):
    """Raised when a JSON response body cannot be parsed."""
