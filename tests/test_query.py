"""Tests for switchyard.http.query — immutable query parameters."""

from switchyard.http.query import QueryParams


class TestQueryParams:
    def test_empty(self) -> None:
        query = QueryParams()
        assert len(query) == 0
        assert query.raw == b""

    def test_first_value(self) -> None:
        query = QueryParams(b"tag=a&tag=b&page=2")
        assert query["tag"] == "a"
        assert query.get_list("tag") == ["a", "b"]
        assert query.get("page") == "2"

    def test_blank_values_kept(self) -> None:
        query = QueryParams(b"q=")
        assert "q" in query
        assert query["q"] == ""

    def test_missing(self) -> None:
        query = QueryParams(b"a=1")
        assert query.get("b") is None
        assert query.get("b", "x") == "x"
        assert query.get_list("b") == []

    def test_raw(self) -> None:
        assert QueryParams(b"a=1&b=2").raw == b"a=1&b=2"
