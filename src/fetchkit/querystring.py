"""Nested query-string serialization using bracket notation."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence
from urllib.parse import quote

from .exceptions import FetchKitValidationError


# Characters left untouched by JavaScript's encodeURIComponent.
_SAFE_CHARS = "!'()*~"


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE_CHARS)


def _format_float(value: float) -> str:
    """Render a float the way ``Number.prototype.toString`` does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    sign = "-" if value < 0 else ""
    # shortest round-trip digits and decimal point position
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    point = parts.exponent + len(digits)
    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits
    exponent = point - 1
    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def _scalar(value: int | float | str) -> str:
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _stringify(data: Any, pairs: list[str], prefix: str) -> list[str]:
    if data is None:
        pairs.append(prefix)
    elif isinstance(data, bool):
        pairs.append(prefix + "=" + ("1" if data else "0"))
    elif isinstance(data, (int, float, str)):
        pairs.append(prefix + "=" + _encode(_scalar(data)))
    elif isinstance(data, (datetime, date)):
        pairs.append(prefix + "=" + _encode(data.isoformat()))
    elif isinstance(data, Mapping):
        for key, value in data.items():
            _stringify(value, pairs, f"{prefix}[{key}]" if prefix else str(key))
    elif isinstance(data, Sequence) and not isinstance(data, (bytes, bytearray)):
        for index, value in enumerate(data):
            _stringify(value, pairs, f"{prefix}[{index}]")
    else:
        raise FetchKitValidationError(
            f"Cannot encode value of type {type(data).__name__} for query key {prefix!r}"
        )
    return pairs


def stringify(data: Mapping[str, Any] | Sequence[Any]) -> str:
    """Serialize a nested structure into ``key=value`` pairs joined by ``&``.

    Nested mapping keys become ``parent[child]`` and sequence items become
    ``parent[0]``. ``None`` leaves emit the bare key, booleans emit ``1``/``0``.
    Empty nested containers emit nothing.
    """
    return "&".join(_stringify(data, [], ""))


def append(url: str, data: Mapping[str, Any] | None = None) -> str:
    """Append the serialized ``data`` to ``url``, keeping any existing query."""
    if not data:
        return url
    query = stringify(data)
    if not query:
        return url
    return url + ("&" if "?" in url else "?") + query
