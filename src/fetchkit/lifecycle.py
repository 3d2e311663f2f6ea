"""Request lifecycle: authorize, send, classify, then retry or re-authorize."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Generator, Mapping

import httpx

from .exceptions import (
    FetchKitDecodeError,
    FetchKitExpiredError,
    FetchKitRetryExhaustedError,
    FetchKitValidationError,
)
from .models import Authorization, AuthorizerRequest, ClientResponse, UnauthorizedMark, lowercase_headers
from .querystring import append, stringify
from .request_options import METHODS, RequestOptions
from .security import redact_headers, retry_after_seconds
from .transport import CancelSignal, HTTPXTransport, TransportResponse

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_expires(expires: Any) -> datetime | None:
    if expires is None:
        return None
    if isinstance(expires, datetime):
        return expires.astimezone(timezone.utc)
    if isinstance(expires, timedelta):
        return _utcnow() + expires
    if isinstance(expires, (int, float)) and not isinstance(expires, bool):
        return _utcnow() + timedelta(milliseconds=expires)
    raise FetchKitValidationError(f"Unsupported expires value: {expires!r}")


def _response_headers(raw: Any) -> dict[str, str]:
    items = raw.items() if isinstance(raw, Mapping) else raw
    headers: dict[str, str] = {}
    for key, value in items:
        name = str(key).lower()
        # repeated fields fold into one comma-separated value
        headers[name] = f"{headers[name]}, {value}" if name in headers else str(value)
    return headers


class ClientRequest:
    """One logical request, possibly spanning several transport attempts.

    The first attempt is scheduled on the running event loop as soon as the
    instance is built; ``response`` (or awaiting the instance) yields the
    settled ``ClientResponse``.

    Attempts run in a loop. A 401 triggers one re-authorization without
    spending a retry. Other failures, including aborted attempts, spend a retry
    until none remain. Non-ok responses received with no retries left are
    returned rather than raised.
    """

    retry_max_delay = 10.0
    jitter_range = 0.35
    retry_after_cap = 60.0

    def __init__(self, url: str, options: RequestOptions) -> None:
        method = (options.method or "").upper()
        if method not in METHODS:
            raise FetchKitValidationError(f"Unsupported method: {options.method}")
        if options.retries < 0:
            raise FetchKitValidationError("retries must be non-negative")
        if options.backoff < 0:
            raise FetchKitValidationError("backoff must be non-negative")

        self.method = method
        self.url = str(httpx.URL(options.webroot).join(url)) if options.webroot else url
        self.headers = lowercase_headers(options.headers)
        self.query = options.query
        self.expires = _resolve_expires(options.expires)
        self.retries = int(options.retries)
        self.backoff = float(options.backoff)
        self.authorizer = options.authorizer
        self.transport = options.transport or HTTPXTransport()
        self.body = self._encode_body(options.body)
        self.unauthorized: UnauthorizedMark | None = None
        self._signal: CancelSignal | None = None
        self._failures = 0

        self.response: asyncio.Task[ClientResponse] = asyncio.get_running_loop().create_task(self._run())

    def __await__(self) -> Generator[Any, None, ClientResponse]:
        return self.response.__await__()

    def cancel(self) -> None:
        """Abort the attempt currently in flight, if any."""
        if self._signal is not None:
            self._signal.abort()

    def _encode_body(self, body: Any) -> str | bytes | None:
        if body is None or isinstance(body, (str, bytes)):
            return body
        if self.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
            return stringify(body)
        if not self.headers.get("content-type"):
            self.headers["content-type"] = JSON_CONTENT_TYPE
        try:
            return json.dumps(body, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise FetchKitValidationError("body is not JSON serializable", cause=exc)

    def _expired(self) -> bool:
        return self.expires is not None and self.expires < _utcnow()

    async def _authorize(self, url: str, headers: Mapping[str, str]) -> Authorization | int | None:
        if self.authorizer is None:
            return None
        result = self.authorizer(
            AuthorizerRequest(url=url, headers=dict(headers), body=self.body, unauthorized=self.unauthorized)
        )
        if inspect.isawaitable(result):
            result = await result
        if result is None or isinstance(result, Authorization):
            return result
        if isinstance(result, int) and not isinstance(result, bool):
            return result
        if isinstance(result, Mapping):
            return Authorization.model_validate(result)
        raise FetchKitValidationError(f"Authorizer returned unsupported value of type {type(result).__name__}")

    async def _run(self) -> ClientResponse:
        while True:
            if self._expired():
                raise FetchKitExpiredError("Request expired")

            url = append(self.url, self.query)
            headers = dict(self.headers)
            auth = await self._authorize(url, headers)
            if isinstance(auth, int):
                logger.info("%s %s rejected by authorizer with status %s", self.method, url, auth)
                return ClientResponse(ok=False, status=auth, status_text="Unauthorized", headers={}, data=None)
            if auth is not None:
                headers.update(auth.headers)
                url = append(url, auth.query)

            self._signal = CancelSignal()
            logger.debug("%s %s headers=%s", self.method, url, redact_headers(headers))
            failure: Exception | None = None
            retry_after: float | None = None
            try:
                response = await self.transport(
                    url,
                    method=self.method,
                    headers=headers,
                    body=self.body,
                    signal=self._signal,
                )
                if response.status == UNAUTHORIZED and self.unauthorized is None:
                    self.unauthorized = UnauthorizedMark(
                        status=response.status,
                        status_text=response.status_text,
                        at=_utcnow(),
                    )
                    logger.info("%s %s unauthorized, authorizing again", self.method, url)
                    continue
                response_headers = _response_headers(response.headers)
                if response.ok or self.retries <= 0:
                    text = await response.text()
                    break
                retry_after = retry_after_seconds(response_headers.get("retry-after"))
                logger.warning(
                    "%s %s returned %s; %d retries left", self.method, url, response.status, self.retries
                )
            except Exception as exc:
                failure = exc
                logger.warning("%s %s failed: %s; %d retries left", self.method, url, exc, self.retries)

            if self.retries <= 0:
                raise FetchKitRetryExhaustedError("Request failed", cause=failure)
            self.retries -= 1
            await self._wait_before_retry(retry_after)

        return self._finalize(response, response_headers, text)

    async def _wait_before_retry(self, retry_after: float | None) -> None:
        if self.backoff <= 0:
            return
        self._failures += 1
        delay = self._retry_delay(self._failures, retry_after)
        logger.debug("%s %s retrying in %.2fs", self.method, self.url, delay)
        await asyncio.sleep(delay)

    def _retry_delay(self, failures: int, retry_after: float | None) -> float:
        if retry_after is not None:
            return min(retry_after, self.retry_after_cap)
        base = self.backoff * (2 ** max(0, failures - 1))
        return min(self.retry_max_delay, base + random.uniform(0, self.jitter_range))

    @staticmethod
    def _finalize(response: TransportResponse, headers: dict[str, str], text: str) -> ClientResponse:
        data: Any = text
        if headers.get("content-type", "").lower().startswith(JSON_CONTENT_TYPE):
            try:
                data = json.loads(text) if text else None
            except ValueError as exc:
                raise FetchKitDecodeError(
                    "Response body is not valid JSON",
                    status_code=response.status,
                    body=text,
                    headers=headers,
                    cause=exc,
                )
        return ClientResponse(
            ok=response.ok,
            status=response.status,
            status_text=response.status_text,
            headers=headers,
            data=data,
        )
