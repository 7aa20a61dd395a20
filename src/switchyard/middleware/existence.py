"""Request normalization — existence flags for the common request sections.

Adds ``has_body``, ``has_params`` and ``has_query`` to every request so
handlers can branch on "did the client send anything?" without poking at
each section themselves. For ``POST /users/7`` with an empty body::

    request.has_params  # True
    request.has_query   # False
    request.has_body    # False

Body data is ignored entirely for GET requests; a handler that needs a
body should accept POST instead.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next
from switchyard.status import StatusCodes

logger = logging.getLogger("switchyard.server")

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def section_exists(section: Any) -> bool:
    """Whether a request section holds anything.

    A mapping or list exists when at least one entry is not ``None``.
    A scalar body (a JSON string or number) exists when it is truthy.
    """
    if isinstance(section, Mapping):
        return any(value is not None for value in section.values())
    if isinstance(section, list):
        return any(item is not None for item in section)
    return bool(section)


def drop_absent(section: Any) -> Any:
    """Return *section* without entries whose value is ``None``.

    Applies to mappings and lists; scalars are returned unchanged.
    """
    if isinstance(section, Mapping):
        return {key: value for key, value in section.items() if value is not None}
    if isinstance(section, list):
        return [item for item in section if item is not None]
    return section


async def read_body_data(request: Request) -> Any:
    """Parse the request body according to its Content-Type.

    JSON and form bodies are parsed; an empty body is ``{}``. Any other
    non-empty body is returned as raw bytes.

    Raises ``HTTPError(400)`` if a JSON or form body cannot be parsed.
    """
    if request.method == "GET":
        return {}

    raw = await request.body()
    if not raw:
        return {}

    ct = (request.content_type or "").lower().split(";")[0].strip()
    try:
        if ct == "application/json" or ct.endswith("+json"):
            return json.loads(raw)
        if ct in _FORM_TYPES:
            form = await request.form()
            return form.to_dict()
    except (ValueError, UnicodeDecodeError) as exc:
        logger.debug("Unparseable %s body on %s %s: %s", ct, request.method, request.path, exc)
        raise HTTPError(
            status=StatusCodes.error.user,
            detail=f"Malformed request body ({ct})",
        ) from exc
    return raw


async def add_existence_props(request: Request, next: Next) -> Response:
    """Annotate the request with parsed body data and ``has_*`` flags.

    ``None`` values are stripped from the body before it is stored on
    ``request.body_data``.
    """
    body = drop_absent(await read_body_data(request))
    annotated = replace(
        request,
        body_data=body,
        has_body=section_exists(body),
        has_params=section_exists(request.path_params),
        has_query=section_exists(request.query),
    )
    return await next(annotated)
