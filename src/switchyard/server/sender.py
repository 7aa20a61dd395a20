"""Response to ASGI messages.

One ``http.response.start`` followed by a single ``http.response.body``;
switchyard does not stream.
"""

from switchyard._internal.asgi import Send
from switchyard.http.response import Response

# 1xx, 204 and 304 never carry a body
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, include_body: bool = True) -> None:
    """Send *response* through ASGI *send*.

    For HEAD requests pass ``include_body=False``: the headers still
    describe the full body, but none is sent.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body if include_body else b""})
