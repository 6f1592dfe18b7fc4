"""Tests for transport accessor factories."""

from __future__ import annotations

import httpx

from pageable.transport import (
    ApiRequest,
    ApiResponse,
    follow_link,
    int_param,
    json_field,
    next_link,
    str_param,
)


def _response(data=None, headers=None) -> ApiResponse:
    return ApiResponse(
        status_code=200,
        data=data,
        headers=httpx.Headers(headers or {}),
        url="https://api.example.test/x",
    )


class TestIntParam:
    def test_reads_and_writes(self):
        get, set_ = int_param("page")
        request = ApiRequest("/pets", params={"page": 3})
        assert get(request) == 3
        set_(request, 4)
        assert request.params == {"page": 4}

    def test_missing_returns_default(self):
        get, _ = int_param("page", default=1)
        assert get(ApiRequest("/pets")) == 1

    def test_missing_without_default_is_absent(self):
        get, _ = int_param("limit")
        assert get(ApiRequest("/pets")) is None

    def test_converts_string_values(self):
        get, _ = int_param("offset")
        assert get(ApiRequest("/pets", params={"offset": "20"})) == 20


class TestStrParam:
    def test_writes_cursor(self):
        set_cursor = str_param("after")
        request = ApiRequest("/pets", params={"limit": 10})
        set_cursor(request, "abc")
        assert request.params == {"limit": 10, "after": "abc"}


class TestJsonField:
    def test_top_level(self):
        assert json_field("items")(_response({"items": [1, 2]})) == [1, 2]

    def test_nested_path(self):
        body = {"meta": {"page": {"next": "tok"}}}
        assert json_field("meta.page.next")(_response(body)) == "tok"

    def test_missing_segment_is_none(self):
        assert json_field("meta.next")(_response({"items": []})) is None
        assert json_field("meta.next")(_response({"meta": None})) is None

    def test_non_mapping_segment_is_none(self):
        assert json_field("items.first")(_response({"items": [1]})) is None

    def test_empty_path_returns_body(self):
        assert json_field("")(_response([1, 2, 3])) == [1, 2, 3]

    def test_false_values_preserved(self):
        assert json_field("has_more")(_response({"has_more": False})) is False


class TestNextLink:
    def test_parse_next_link(self):
        header = (
            '<https://api.github.com/repos/a/b/commits?page=2>; rel="next", '
            '<https://api.github.com/repos/a/b/commits?page=5>; rel="last"'
        )
        url = "https://api.github.com/repos/a/b/commits?page=2"
        assert next_link(_response(headers={"Link": header})) == url

    def test_next_after_prev(self):
        header = '<https://x.test/p?page=1>; rel="prev", <https://x.test/p?page=3>; rel="next"'
        assert next_link(_response(headers={"Link": header})) == "https://x.test/p?page=3"

    def test_no_header(self):
        assert next_link(_response()) is None

    def test_no_next(self):
        header = '<https://api.github.com/repos/a/b/commits?page=1>; rel="last"'
        assert next_link(_response(headers={"Link": header})) is None


class TestFollowLink:
    def test_replaces_path_and_clears_params(self):
        request = ApiRequest("/pets", params={"per_page": 100}, headers={"X-Tenant": "t"})
        follow_link(request, "https://api.example.test/pets?page=2")
        assert request.path == "https://api.example.test/pets?page=2"
        assert request.params == {}
        assert request.headers == {"X-Tenant": "t"}
