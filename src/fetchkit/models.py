"""Typed values exchanged between the request lifecycle and its callers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


def lowercase_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(key).lower(): str(value) for key, value in headers.items()}


class FetchKitModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class UnauthorizedMark(FetchKitModel):
    """The single unauthorized response already seen by a logical request."""

    status: int
    status_text: str
    at: datetime


class AuthorizerRequest(FetchKitModel):
    """Snapshot handed to the authorizer before each attempt."""

    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | bytes | None = None
    unauthorized: UnauthorizedMark | None = None


class Authorization(FetchKitModel):
    """Headers and query parameters an authorizer adds to the next attempt."""

    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _lowercase_header_keys(cls, value: Any) -> Any:
        if isinstance(value, Mapping) and isinstance(value.get("headers"), Mapping):
            return {**value, "headers": lowercase_headers(value["headers"])}
        return value


class ClientResponse(FetchKitModel):
    ok: bool
    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None
