"""The request object handlers and middleware receive.

Metadata is frozen when the request is built from the ASGI scope. The
body is read lazily, once, and cached; copies made with
``dataclasses.replace`` share that cache, so middleware that annotates a
request never re-reads the stream.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from switchyard._internal.asgi import Receive, Scope
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams

if TYPE_CHECKING:
    from switchyard.http.forms import FormData


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``body_data`` and the ``has_*`` flags are ``None`` until the
    ``add_existence_props`` middleware has run::

        request.has_body     # bool: parsed body holds a defined value
        request.has_params   # bool: a path parameter was captured
        request.has_query    # bool: the query string holds a value
        request.body_data    # parsed body, ``None`` entries removed
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    body_data: Any = None
    has_body: bool | None = None
    has_params: bool | None = None
    has_query: bool | None = None

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build a request from an ASGI ``http`` scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        if not self.query.raw:
            return self.path
        return f"{self.path}?{self.query.raw.decode('latin-1')}"

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        return replace(self, path_params=path_params)

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield body chunks straight from ASGI. Not cached."""
        if self._receive is None:
            return
        more = True
        while more:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more = message.get("more_body", False)

    async def body(self) -> bytes:
        """The whole body. Read from ASGI on first call, cached after."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def json(self) -> Any:
        return json_module.loads(await self.body())

    async def form(self) -> FormData:
        """The body parsed as a form. Cached.

        Multipart bodies need ``python-multipart``
        (``pip install switchyard[forms]``).
        """
        if "form" not in self._cache:
            from switchyard.http.forms import parse_form_data

            content_type = self.content_type or "application/x-www-form-urlencoded"
            self._cache["form"] = parse_form_data(await self.body(), content_type)
        return self._cache["form"]
