"""Immutable HTTP response.

Handlers may return one directly, or return a plain value and let
negotiation build it. Every ``with_*`` call returns a new Response::

    Response("created").with_status(201).with_header("Location", "/api/users/7")
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """A status, a body, a content type and extra headers."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json_body(cls, data: Any, status: int = 200) -> Response:
        """Serialize *data* to JSON, keeping its key order."""
        return cls(json_module.dumps(data), status, JSON_CONTENT_TYPE)

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        """Append one header. Existing headers of the same name are kept."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def header(self, name: str) -> str | None:
        """First value of header *name*, case-insensitive."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body

    @property
    def json(self) -> Any:
        """The body decoded as JSON."""
        return json_module.loads(self.body_bytes)
