from __future__ import annotations

from datetime import date, datetime

import pytest

from fetchkit.exceptions import FetchKitValidationError
from fetchkit.querystring import append, stringify


def test_stringify_scalar_leaves() -> None:
    assert stringify({"q": "hello world"}) == "q=hello%20world"
    assert stringify({"n": 5}) == "n=5"
    assert stringify({"f": 1.5}) == "f=1.5"
    assert stringify({"f": 2.0}) == "f=2"
    assert stringify({"flag": None}) == "flag"
    assert stringify({"yes": True, "no": False}) == "yes=1&no=0"


def test_stringify_encodes_like_encode_uri_component() -> None:
    assert stringify({"v": "a&b=c/d?"}) == "v=a%26b%3Dc%2Fd%3F"
    assert stringify({"v": "keep-_.!~*'()"}) == "v=keep-_.!~*'()"
    assert stringify({"v": "ä"}) == "v=%C3%A4"


def test_stringify_nested_mapping_keeps_insertion_order() -> None:
    data = {"z": 1, "filter": {"b": "2", "a": {"deep": "x"}}, "a": 3}
    assert stringify(data) == "z=1&filter[b]=2&filter[a][deep]=x&a=3"


def test_stringify_arrays_use_ascending_indices() -> None:
    assert stringify({"ids": [10, 20, 30]}) == "ids[0]=10&ids[1]=20&ids[2]=30"
    assert stringify({"rows": [{"id": 1}, ("a", None)]}) == "rows[0][id]=1&rows[1][0]=a&rows[1][1]"


def test_stringify_dates_use_iso_format() -> None:
    assert stringify({"since": datetime(2024, 1, 2, 3, 4, 5)}) == "since=2024-01-02T03%3A04%3A05"
    assert stringify({"day": date(2024, 1, 2)}) == "day=2024-01-02"


def test_stringify_skips_empty_nested_containers() -> None:
    assert stringify({"a": {}, "b": [], "c": 1}) == "c=1"
    assert stringify({}) == ""


def test_stringify_rejects_unknown_types() -> None:
    with pytest.raises(FetchKitValidationError, match="object"):
        stringify({"x": object()})


def test_append_without_data_returns_url() -> None:
    assert append("https://example.com/a") == "https://example.com/a"
    assert append("https://example.com/a", {}) == "https://example.com/a"
    assert append("https://example.com/a", {"x": {}, "y": []}) == "https://example.com/a"


def test_append_picks_separator() -> None:
    assert append("/items", {"page": 2}) == "/items?page=2"
    assert append("/items?sort=asc", {"page": 2}) == "/items?sort=asc&page=2"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
        (0.0, "0"),
        (-2.5, "-2.5"),
        (0.1, "0.1"),
        (0.000001, "0.000001"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (1e20, "100000000000000000000"),
        (1e21, "1e%2B21"),
        (1.2345e25, "1.2345e%2B25"),
    ],
)
def test_stringify_floats_render_like_javascript_numbers(value: float, expected: str) -> None:
    assert stringify({"n": value}) == "n=" + expected
