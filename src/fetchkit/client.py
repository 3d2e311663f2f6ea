"""Verb helpers and the ``Client`` wrapper with per-instance defaults."""

from __future__ import annotations

import os
from typing import Any, Mapping

from .models import ClientResponse, lowercase_headers
from .lifecycle import ClientRequest
from .request_options import Authorizer, RequestOptions
from .security import validate_base_url
from .transport import Transport

_UNSET: Any = object()


async def request(
    method: str,
    url: str,
    *,
    webroot: str | None = None,
    headers: Mapping[str, str] | None = None,
    query: Mapping[str, Any] | None = None,
    body: Any = None,
    expires: Any = None,
    retries: int = 0,
    authorizer: Authorizer | None = None,
    transport: Transport | None = None,
    backoff: float = 0.0,
) -> ClientResponse:
    options = RequestOptions(
        method=method,
        webroot=webroot,
        headers=headers,
        query=query,
        body=body,
        expires=expires,
        retries=retries,
        authorizer=authorizer,
        transport=transport,
        backoff=backoff,
    )
    return await ClientRequest(url, options)


async def get(url: str, **options: Any) -> ClientResponse:
    if "body" in options:
        raise TypeError("get() does not accept a body")
    return await request("GET", url, **options)


async def post(url: str, **options: Any) -> ClientResponse:
    return await request("POST", url, **options)


async def put(url: str, **options: Any) -> ClientResponse:
    return await request("PUT", url, **options)


async def patch(url: str, **options: Any) -> ClientResponse:
    return await request("PATCH", url, **options)


async def delete(url: str, **options: Any) -> ClientResponse:
    return await request("DELETE", url, **options)


class Client:
    """Issues requests with instance-level defaults merged into every call.

    Headers and query are merged with per-call values winning. A webroot passed
    on the call (even ``None``) replaces the instance webroot. The authorizer
    and transport fall back to the instance's when not given.
    """

    def __init__(
        self,
        *,
        webroot: str | None = None,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, Any] | None = None,
        authorizer: Authorizer | None = None,
        transport: Transport | None = None,
        webroot_env_var: str = "FETCHKIT_WEBROOT",
    ) -> None:
        self.webroot = webroot or os.getenv(webroot_env_var) or None
        if self.webroot:
            validate_base_url(self.webroot)
        self.headers = lowercase_headers(headers)
        self.query = dict(query) if query else {}
        self.authorizer = authorizer
        self.transport = transport

    async def request(
        self,
        method: str,
        url: str,
        *,
        webroot: str | None = _UNSET,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        expires: Any = None,
        retries: int = 0,
        authorizer: Authorizer | None = None,
        transport: Transport | None = None,
        backoff: float = 0.0,
    ) -> ClientResponse:
        if webroot is _UNSET:
            webroot = self.webroot
        elif webroot:
            validate_base_url(webroot)
        return await request(
            method,
            url,
            webroot=webroot,
            headers={**self.headers, **lowercase_headers(headers)},
            query={**self.query, **(query or {})},
            body=body,
            expires=expires,
            retries=retries,
            authorizer=authorizer if authorizer is not None else self.authorizer,
            transport=transport if transport is not None else self.transport,
            backoff=backoff,
        )

    async def get(self, url: str, **options: Any) -> ClientResponse:
        if "body" in options:
            raise TypeError("get() does not accept a body")
        return await self.request("GET", url, **options)

    async def post(self, url: str, **options: Any) -> ClientResponse:
        return await self.request("POST", url, **options)

    async def put(self, url: str, **options: Any) -> ClientResponse:
        return await self.request("PUT", url, **options)

    async def patch(self, url: str, **options: Any) -> ClientResponse:
        return await self.request("PATCH", url, **options)

    async def delete(self, url: str, **options: Any) -> ClientResponse:
        return await self.request("DELETE", url, **options)
