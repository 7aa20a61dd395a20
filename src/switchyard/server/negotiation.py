"""Content negotiation — maps return values to Response objects.

Inspects the value a handler returned and produces a Response.
isinstance-based dispatch, no magic, fully predictable.
"""

from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.http.response import Response
from switchyard.status import StatusCodes


def negotiate(value: Any, *, method: str = "GET", status: int | None = None) -> Response:
    """Convert a handler's return value to a Response.

    Plain values get *status*, or the success status for *method* from
    ``StatusCodes`` (so a POST returning a dict answers 201).

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``(value, int)``        -> negotiate value, override status
    3. ``(value, int, dict)``  -> negotiate value, override status + headers
    4. ``None``                -> empty body
    5. ``str``                 -> text/html
    6. ``bytes``               -> application/octet-stream
    7. ``dict`` / ``list``     -> application/json
    """
    if status is None:
        status = StatusCodes.success.for_method(method)

    match value:
        case Response():
            return value
        case tuple((inner, int() as override)):
            return negotiate(inner, method=method, status=override)
        case tuple((inner, int() as override, dict() as headers)):
            return negotiate(inner, method=method, status=override).with_headers(headers)
        case None:
            return Response(status=status)
        case str():
            return Response(body=value, status=status)
        case bytes():
            return Response(body=value, status=status, content_type="application/octet-stream")
        case dict() | list():
            return Response.json_body(value, status=status)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return a Response, str, bytes, dict, list, or None."
            )
            raise ConfigurationError(msg)
