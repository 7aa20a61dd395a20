"""Tests for switchyard.http.headers — case-insensitive immutable headers."""

from switchyard.http.headers import Headers


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        headers = Headers(((b"Content-Type", b"application/json"),))
        assert headers["content-type"] == "application/json"
        assert headers["CONTENT-TYPE"] == "application/json"
        assert "Content-Type" in headers

    def test_first_value_and_list(self) -> None:
        headers = Headers(((b"accept", b"text/html"), (b"Accept", b"application/json")))
        assert headers["accept"] == "text/html"
        assert headers.get_list("ACCEPT") == ["text/html", "application/json"]
        assert len(headers) == 1

    def test_get_default(self) -> None:
        headers = Headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "fallback") == "fallback"
        assert headers.get_list("x-missing") == []

    def test_non_string_not_contained(self) -> None:
        assert 1 not in Headers(((b"a", b"b"),))

    def test_from_dict(self) -> None:
        headers = Headers.from_dict({"X-Request-Id": "abc"})
        assert headers["x-request-id"] == "abc"
        assert headers.raw == ((b"x-request-id", b"abc"),)

    def test_iteration_yields_lowercase_names(self) -> None:
        headers = Headers(((b"Host", b"example.com"), (b"X-A", b"1")))
        assert list(headers) == ["host", "x-a"]
