"""Construction input for one logical request."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Mapping, Sequence, Union

from .models import Authorization, AuthorizerRequest
from .transport import Transport

AuthorizerResult = Union[Authorization, Mapping[str, Any], int, None]
Authorizer = Callable[[AuthorizerRequest], Union[AuthorizerResult, Awaitable[AuthorizerResult]]]

METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class RequestOptions:
    method: str = "GET"
    webroot: str | None = None
    headers: Mapping[str, str] | None = None
    query: Mapping[str, Any] | None = None
    body: str | bytes | Mapping[str, Any] | Sequence[Any] | None = None
    # Absolute instant, or a relative timedelta / number of milliseconds.
    expires: datetime | timedelta | int | float | None = None
    retries: int = 0
    authorizer: Authorizer | None = None
    transport: Transport | None = None
    backoff: float = 0.0
