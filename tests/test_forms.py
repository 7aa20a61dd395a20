"""Tests for switchyard.http.forms — form body parsing."""

import pytest

from switchyard.http.forms import FormData, UploadFile, parse_form_data

BOUNDARY = "----switchyardboundary"


def _multipart(*parts: str) -> bytes:
    body = "".join(f"--{BOUNDARY}\r\n{part}\r\n" for part in parts)
    return f"{body}--{BOUNDARY}--\r\n".encode()


class TestUrlEncoded:
    def test_fields(self) -> None:
        form = parse_form_data(b"a=1&b=two+words&b=x", "application/x-www-form-urlencoded")
        assert form["a"] == "1"
        assert form.get_list("b") == ["two words", "x"]

    def test_blank_values_kept(self) -> None:
        form = parse_form_data(b"a=", "application/x-www-form-urlencoded; charset=utf-8")
        assert form["a"] == ""

    def test_unsupported_type(self) -> None:
        with pytest.raises(ValueError, match="Unsupported form content type"):
            parse_form_data(b"a=1", "text/plain")


class TestMultipart:
    def test_fields_and_files(self) -> None:
        body = _multipart(
            'Content-Disposition: form-data; name="title"\r\n\r\nhello',
            'Content-Disposition: form-data; name="doc"; filename="a.txt"\r\n'
            "Content-Type: text/plain\r\n\r\nfile body",
        )
        form = parse_form_data(body, f"multipart/form-data; boundary={BOUNDARY}")

        assert form["title"] == "hello"
        upload = form.files["doc"]
        assert upload.filename == "a.txt"
        assert upload.content_type == "text/plain"
        assert upload.content == b"file body"
        assert upload.size == 9

    def test_missing_boundary(self) -> None:
        with pytest.raises(ValueError, match="boundary"):
            parse_form_data(b"", "multipart/form-data")


class TestFormData:
    def test_to_dict_unwraps_single_values(self) -> None:
        upload = UploadFile("a.txt", "text/plain", b"x")
        form = FormData({"one": ["1"], "many": ["a", "b"]}, {"doc": upload})
        assert form.to_dict() == {"one": "1", "many": ["a", "b"], "doc": upload}

    def test_mapping_protocol(self) -> None:
        form = FormData({"a": ["1"]})
        assert "a" in form
        assert len(form) == 1
        assert list(form) == ["a"]
        assert form.files == {}
