"""Form body parsing — URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``. Multipart needs the
optional ``python-multipart`` package (``pip install switchyard[forms]``).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

from switchyard._internal.multimap import MultiValueMapping
from switchyard.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission, held in memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class FormData(MultiValueMapping):
    """Immutable parsed form data.

    Text fields behave like ``QueryParams``; uploads live in ``files``,
    keyed by field name.
    """

    __slots__ = ("_files",)

    def __init__(
        self,
        data: dict[str, list[str]],
        files: dict[str, UploadFile] | None = None,
    ) -> None:
        self._values = data
        self._files = files or {}

    @property
    def files(self) -> Mapping[str, UploadFile]:
        """Uploaded files by field name."""
        return self._files

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a plain dict: single values unwrapped, files included."""
        result: dict[str, Any] = {
            key: values[0] if len(values) == 1 else list(values)
            for key, values in self._values.items()
        }
        result.update(self._files)
        return result


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into FormData.

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If the content type is not a form encoding, or a
            multipart body has no boundary.
    """
    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))

    if ct_lower == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install switchyard[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    files: dict[str, UploadFile] = {}

    # Per-part state, reset by on_part_begin
    headers: dict[str, str] = {}
    pending_header = ""
    chunk = bytearray()

    def on_part_begin() -> None:
        nonlocal chunk
        headers.clear()
        chunk = bytearray()

    def on_part_data(buf: bytes, start: int, end: int) -> None:
        chunk.extend(buf[start:end])

    def on_header_field(buf: bytes, start: int, end: int) -> None:
        nonlocal pending_header
        pending_header = buf[start:end].decode("latin-1").lower()

    def on_header_value(buf: bytes, start: int, end: int) -> None:
        headers[pending_header] = buf[start:end].decode("latin-1")

    def on_part_end() -> None:
        _, params = parse_options_header(
            headers.get("content-disposition", "").encode("latin-1")
        )
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            files[field_name] = UploadFile(
                filename=filename.decode("utf-8"),
                content_type=headers.get("content-type", "application/octet-stream"),
                content=bytes(chunk),
            )
        else:
            data.setdefault(field_name, []).append(chunk.decode("utf-8", errors="replace"))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
        },
    )
    parser.write(body)
    parser.finalize()

    return FormData(data, files)
