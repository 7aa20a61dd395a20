"""Tests for switchyard.server.negotiation — return value to Response."""

import pytest

from switchyard.errors import ConfigurationError
from switchyard.http.response import Response
from switchyard.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passes_through(self) -> None:
        response = Response("x", status=418)
        assert negotiate(response, method="POST") is response

    def test_str_is_html(self) -> None:
        response = negotiate("<p>hi</p>")
        assert response.status == 200
        assert response.content_type.startswith("text/html")

    def test_bytes_is_octet_stream(self) -> None:
        assert negotiate(b"\x00").content_type == "application/octet-stream"

    def test_dict_and_list_are_json(self) -> None:
        assert negotiate({"a": 1}).json == {"a": 1}
        assert negotiate([1, 2]).json == [1, 2]

    def test_none_is_empty(self) -> None:
        response = negotiate(None)
        assert response.body == ""
        assert response.status == 200

    @pytest.mark.parametrize(
        ("method", "status"),
        [("GET", 200), ("POST", 201), ("PUT", 200), ("PATCH", 200), ("DELETE", 204), ("HEAD", 200)],
    )
    def test_status_follows_method(self, method: str, status: int) -> None:
        assert negotiate({"ok": True}, method=method).status == status

    def test_explicit_status_wins(self) -> None:
        assert negotiate("x", method="POST", status=404).status == 404

    def test_tuple_overrides_status(self) -> None:
        response = negotiate(({"queued": True}, 202), method="POST")
        assert response.status == 202
        assert response.json == {"queued": True}

    def test_tuple_with_headers(self) -> None:
        response = negotiate(("x", 200, {"X-Trace": "1"}))
        assert response.header("x-trace") == "1"

    def test_list_is_not_a_status_tuple(self) -> None:
        response = negotiate(["a", 201])
        assert response.status == 200
        assert response.json == ["a", 201]

    def test_unsupported_type(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot convert int"):
            negotiate(42)
