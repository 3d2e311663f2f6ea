"""Header redaction, webroot validation and Retry-After parsing."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Mapping
from urllib.parse import urlparse


SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "proxy-authorization",
    "x-api-key",
}


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers safe to log, with credential values masked."""
    return {key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value for key, value in headers.items()}


def validate_base_url(url: str) -> None:
    """Reject webroots that cannot serve as a base for relative request URLs."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("webroot must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported webroot scheme: {parsed.scheme}")
    if "\x00" in url:
        raise ValueError("Invalid webroot")


def retry_after_seconds(raw: str | None) -> float | None:
    """Seconds to wait according to a Retry-After value, or None if unusable.

    Accepts both delta-seconds and HTTP-date forms. Past dates yield 0.
    """
    value = (raw or "").strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0.0, seconds)
