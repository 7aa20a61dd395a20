"""Tests for switchyard.middleware.existence — request existence flags."""

import json
from typing import Any

import pytest

from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.existence import (
    add_existence_props,
    drop_absent,
    read_body_data,
    section_exists,
)


def _make_request(
    method: str = "POST",
    body: bytes = b"",
    content_type: str | None = None,
    query_string: bytes = b"",
    path_params: dict[str, str] | None = None,
) -> Request:
    headers = [(b"content-type", content_type.encode())] if content_type else []
    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": query_string,
        "headers": headers,
    }
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    request = Request.from_asgi(scope, receive)
    return request.with_path_params(path_params or {})


async def _annotate(request: Request) -> Request:
    """Run the middleware and return the request it passed on."""
    seen: list[Request] = []

    async def next_(req: Request) -> Response:
        seen.append(req)
        return Response()

    await add_existence_props(request, next_)
    return seen[0]


class TestSectionExists:
    @pytest.mark.parametrize(
        ("section", "expected"),
        [
            ({}, False),
            ({"a": None}, False),
            ({"a": None, "b": 0}, True),
            ({"a": ""}, True),
            ([], False),
            ([1], True),
            ([None, None], False),
            ([None, 0], True),
            ("", False),
            ("text", True),
            (0, False),
            (None, False),
        ],
    )
    def test_section_exists(self, section: Any, expected: bool) -> None:
        assert section_exists(section) is expected


class TestDropAbsent:
    def test_drops_none_values(self) -> None:
        assert drop_absent({"a": 1, "b": None, "c": False}) == {"a": 1, "c": False}

    def test_drops_none_list_items(self) -> None:
        assert drop_absent([None, 1, None, 0]) == [1, 0]

    def test_scalar_unchanged(self) -> None:
        assert drop_absent("text") == "text"
        assert drop_absent(0) == 0


class TestReadBodyData:
    async def test_get_body_ignored(self) -> None:
        request = _make_request("GET", b'{"a": 1}', "application/json")
        assert await read_body_data(request) == {}

    async def test_empty_body(self) -> None:
        assert await read_body_data(_make_request("POST")) == {}

    async def test_json(self) -> None:
        request = _make_request("POST", json.dumps({"a": 1}).encode(), "application/json")
        assert await read_body_data(request) == {"a": 1}

    async def test_vendor_json(self) -> None:
        request = _make_request("PUT", b"[1, 2]", "application/vnd.api+json; charset=utf-8")
        assert await read_body_data(request) == [1, 2]

    async def test_urlencoded_form(self) -> None:
        request = _make_request(
            "POST", b"name=ada&tag=a&tag=b", "application/x-www-form-urlencoded"
        )
        assert await read_body_data(request) == {"name": "ada", "tag": ["a", "b"]}

    async def test_other_content_type_is_raw(self) -> None:
        request = _make_request("POST", b"plain", "text/plain")
        assert await read_body_data(request) == b"plain"

    async def test_malformed_json_is_400(self) -> None:
        request = _make_request("POST", b"{not json", "application/json")
        with pytest.raises(HTTPError) as exc_info:
            await read_body_data(request)
        assert exc_info.value.status == 400
        assert "application/json" in exc_info.value.detail


class TestAddExistenceProps:
    async def test_get_with_query_only(self) -> None:
        request = await _annotate(_make_request("GET", query_string=b"page=1"))
        assert request.body_data == {}
        assert request.has_body is False
        assert request.has_params is False
        assert request.has_query is True

    async def test_post_with_params_and_empty_body(self) -> None:
        request = await _annotate(_make_request("POST", path_params={"id": "7"}))
        assert request.has_params is True
        assert request.has_query is False
        assert request.has_body is False

    async def test_none_entries_stripped(self) -> None:
        body = json.dumps({"name": "ada", "nickname": None}).encode()
        request = await _annotate(_make_request("POST", body, "application/json"))
        assert request.body_data == {"name": "ada"}
        assert request.has_body is True

    async def test_all_none_body_does_not_exist(self) -> None:
        body = json.dumps({"a": None}).encode()
        request = await _annotate(_make_request("PATCH", body, "application/json"))
        assert request.body_data == {}
        assert request.has_body is False

    async def test_non_mapping_body(self) -> None:
        request = await _annotate(_make_request("POST", b"[]", "application/json"))
        assert request.body_data == []
        assert request.has_body is False

    async def test_all_none_list_body_does_not_exist(self) -> None:
        request = await _annotate(_make_request("POST", b"[null, null]", "application/json"))
        assert request.body_data == []
        assert request.has_body is False

    async def test_list_body_keeps_defined_items(self) -> None:
        request = await _annotate(_make_request("PUT", b"[null, 1]", "application/json"))
        assert request.body_data == [1]
        assert request.has_body is True
    async def test_original_request_untouched(self) -> None:
        original = _make_request("POST", path_params={"id": "1"})
        annotated = await _annotate(original)
        assert original.has_params is None
        assert annotated is not original

    async def test_returns_next_response(self) -> None:
        async def next_(req: Request) -> Response:
            return Response("downstream", status=202)

        response = await add_existence_props(_make_request("GET"), next_)
        assert response.status == 202
        assert response.text == "downstream"
