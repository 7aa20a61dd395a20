"""In-process test client for switchyard applications.

Drives the App through its ASGI interface, with no sockets involved, and
hands back the same ``Response`` type handlers build.
"""

from __future__ import annotations

import json as json_module
from typing import Any

from switchyard._internal.asgi import Message, Scope
from switchyard.app import App
from switchyard.http.response import Response


def _build_scope(method: str, target: str, headers: dict[str, str]) -> Scope:
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _Recorder:
    """Collects the ASGI messages an app sends for one request."""

    __slots__ = ("chunks", "headers", "status")

    def __init__(self) -> None:
        self.status = 500
        self.headers: list[tuple[bytes, bytes]] = []
        self.chunks: list[bytes] = []

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", ()))
        elif message["type"] == "http.response.body":
            self.chunks.append(message.get("body", b""))

    def to_response(self) -> Response:
        content_type = "text/html; charset=utf-8"
        extra: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                extra.append((name, value))
        return Response(
            body=b"".join(self.chunks),
            status=self.status,
            content_type=content_type,
            headers=tuple(extra),
        )


class TestClient:
    __test__ = False  # not a pytest test class
    """Async test client.

    ::

        async with TestClient(app) as client:
            response = await client.post("/api/users", json={"name": "ada"})
            assert response.status == 201
            assert response.json == {"created": {"name": "ada"}}

    Entering the context freezes the app, so registration errors
    surface there rather than on the first request.
    """

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def post(self, path: str, **kwargs: Any) -> Response:
        """POST; accepts ``headers=``, ``body=`` and ``json=``."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        """PUT; accepts ``headers=``, ``body=`` and ``json=``."""
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        """PATCH; accepts ``headers=``, ``body=`` and ``json=``."""
        return await self.request("PATCH", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Send one request through the app and return its response.

        ``json=`` replaces *body* with the encoded payload and sets
        ``content-type: application/json`` unless *headers* name one.
        """
        request_headers = dict(headers or {})
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            if "content-type" not in {name.lower() for name in request_headers}:
                request_headers["content-type"] = "application/json"

        pending = [{"type": "http.request", "body": body, "more_body": False}]

        async def receive() -> Message:
            return pending.pop() if pending else {"type": "http.disconnect"}

        recorder = _Recorder()
        await self.app(_build_scope(method, path, request_headers), receive, recorder)
        return recorder.to_response()
