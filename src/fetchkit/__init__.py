"""Minimal asynchronous HTTP client with retries and re-authorization."""

from .client import Client, delete, get, patch, post, put, request
from .exceptions import (
    FetchKitAbortedError,
    FetchKitDecodeError,
    FetchKitError,
    FetchKitExpiredError,
    FetchKitNetworkError,
    FetchKitRetryExhaustedError,
    FetchKitTimeoutError,
    FetchKitTransportError,
    FetchKitValidationError,
)
from .models import Authorization, AuthorizerRequest, ClientResponse, UnauthorizedMark
from .lifecycle import ClientRequest
from .request_options import RequestOptions
from .transport import CancelSignal, HTTPXTransport

__all__ = [
    "Authorization",
    "AuthorizerRequest",
    "CancelSignal",
    "Client",
    "ClientRequest",
    "ClientResponse",
    "FetchKitAbortedError",
    "FetchKitDecodeError",
    "FetchKitError",
    "FetchKitExpiredError",
    "FetchKitNetworkError",
    "FetchKitRetryExhaustedError",
    "FetchKitTimeoutError",
    "FetchKitTransportError",
    "FetchKitValidationError",
    "HTTPXTransport",
    "RequestOptions",
    "UnauthorizedMark",
    "delete",
    "get",
    "patch",
    "post",
    "put",
    "request",
]
