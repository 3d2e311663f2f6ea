"""Transport contract, cancel signal and the default httpx transport."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

import httpx

from .exceptions import FetchKitAbortedError, FetchKitNetworkError, FetchKitTimeoutError

logger = logging.getLogger(__name__)


class CancelSignal:
    """One-shot abort flag shared between a lifecycle attempt and its transport."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def abort(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class TransportResponse(Protocol):
    ok: bool
    status: int
    status_text: str
    headers: Any

    async def text(self) -> str: ...


class Transport(Protocol):
    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: Mapping[str, str],
        body: str | bytes | None,
        signal: CancelSignal,
    ) -> TransportResponse: ...


class HTTPXResponse:
    """Adapts an ``httpx.Response`` to the transport response contract."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self.ok = response.is_success
        self.status = response.status_code
        self.status_text = response.reason_phrase
        self.headers = response.headers.items()

    async def text(self) -> str:
        return self._response.text


class HTTPXTransport:
    """Sends attempts through ``httpx.AsyncClient``.

    A caller-supplied client is reused and never closed here. Without one, each
    attempt opens and closes its own client.
    """

    default_timeout = 30.0

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = default_timeout,
        follow_redirects: bool = True,
    ) -> None:
        self._client = client
        self.timeout = timeout
        self.follow_redirects = follow_redirects

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: Mapping[str, str],
        body: str | bytes | None,
        signal: CancelSignal,
    ) -> HTTPXResponse:
        if signal.aborted:
            raise FetchKitAbortedError("Request aborted")
        if self._client is not None:
            return await self._send(self._client, url, method, headers, body, signal)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            trust_env=False,
        ) as client:
            return await self._send(client, url, method, headers, body, signal)

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: str | bytes | None,
        signal: CancelSignal,
    ) -> HTTPXResponse:
        request_task = asyncio.ensure_future(
            client.request(method, url, headers=dict(headers), content=body, timeout=self.timeout)
        )
        abort_task = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({request_task, abort_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            abort_task.cancel()
            if not request_task.done():
                request_task.cancel()
                await asyncio.wait({request_task})

        if request_task.cancelled():
            logger.debug("%s %s aborted", method, url)
            raise FetchKitAbortedError("Request aborted")
        try:
            response = request_task.result()
        except httpx.TimeoutException as exc:
            raise FetchKitTimeoutError("Request timed out", cause=exc)
        except httpx.HTTPError as exc:
            raise FetchKitNetworkError("Network error", cause=exc)
        return HTTPXResponse(response)
