"""Error handling for the root and api router trees.

The four default handlers mirror each other: the api tree answers in
JSON (``{"message": ...}``), the root tree answers with a bare status.
Both log through the ``switchyard.server`` logger, with a full traceback
when ``config.log_stack_on_error`` is set.

Handlers are looked up on the router that owns the request, then on its
ancestors; the first one found wins.
"""

from __future__ import annotations

import inspect
import logging
import traceback
from typing import TYPE_CHECKING, Any

from switchyard._internal.invoke import invoke
from switchyard._internal.types import ErrorHandler
from switchyard.config import ServerConfig
from switchyard.errors import HTTPError, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.server.negotiation import negotiate
from switchyard.status import StatusCodes

if TYPE_CHECKING:
    from switchyard.routing.router import Router

logger = logging.getLogger("switchyard.server")


def error_status(exc: BaseException) -> int:
    """HTTP status for *exc*: its own for ``HTTPError``, 500 otherwise."""
    if isinstance(exc, HTTPError):
        return exc.status
    return StatusCodes.error.default


def error_message(exc: BaseException) -> str:
    """Client-facing message for *exc*."""
    if isinstance(exc, HTTPError):
        return exc.detail or str(exc.status)
    return str(exc) or type(exc).__name__


def log_error(exc: BaseException, config: ServerConfig) -> None:
    """Log *exc* as an error, with its traceback if the config asks for it."""
    if config.log_stack_on_error:
        logger.error("%s", "".join(traceback.format_exception(exc)).rstrip())
    else:
        logger.error("%s", exc)


def _with_error_headers(response: Response, exc: BaseException) -> Response:
    if isinstance(exc, HTTPError) and exc.headers:
        return response.with_headers(dict(exc.headers))
    return response


# -- Default handlers ---------------------------------------------------------


def api_not_found_handler(request: Request) -> Response:
    """404 for the api tree: raise, so the api error handler renders JSON."""
    raise NotFound(f"Route not found: {request.method} {request.url}")


def api_generic_error_handler(
    request: Request, exc: BaseException, config: ServerConfig
) -> Response:
    """Error handler for the api tree: log, then ``{"message": ...}`` as JSON."""
    log_error(exc, config)
    response = Response.json_body({"message": error_message(exc)}, status=error_status(exc))
    return _with_error_headers(response, exc)


def root_not_found_handler(request: Request) -> Response:
    """404 for the root tree: empty body."""
    return Response(status=StatusCodes.error.missing)


def root_generic_error_handler(
    request: Request, exc: BaseException, config: ServerConfig
) -> Response:
    """Error handler for the root tree: log, then an empty body with the status."""
    log_error(exc, config)
    return _with_error_headers(Response(status=error_status(exc)), exc)


# -- Dispatch -----------------------------------------------------------------


async def call_error_handler(
    handler: ErrorHandler,
    request: Request,
    exc: BaseException,
    config: ServerConfig,
) -> Response:
    """Invoke an error handler with introspected arguments.

    Handlers may accept zero to three positional args, in the order
    ``(request, exc, config)``. Sync and async handlers both work.
    A plain return value gets the error's status, not 200.
    """
    arity = len(inspect.signature(handler).parameters)
    args: tuple[Any, ...] = (request, exc, config)[: min(arity, 3)]
    result = await invoke(handler, *args)
    return negotiate(result, method=request.method, status=error_status(exc))


def default_error_response(exc: BaseException, request: Request, config: ServerConfig) -> Response:
    """Plain-text response used when no router in the chain has a handler."""
    status = error_status(exc)
    if status >= StatusCodes.error.default:
        logger.exception("%d %s %s", status, request.method, request.path, exc_info=exc)
    else:
        logger.debug("%d %s %s: %s", status, request.method, request.path, exc)

    detail = error_message(exc) if isinstance(exc, HTTPError) else "Internal Server Error"
    if config.debug:
        detail = f"{status}: {detail}"
    response = Response(body=detail, status=status, content_type="text/plain; charset=utf-8")
    return _with_error_headers(response, exc)


async def handle_error(
    exc: BaseException,
    request: Request,
    router: Router,
    config: ServerConfig,
) -> Response:
    """Render *exc* with the nearest error handler above *router*."""
    handler = router.nearest_error_handler()
    if handler is None:
        return default_error_response(exc, request, config)
    try:
        return await call_error_handler(handler, request, exc, config)
    except Exception as handler_exc:
        logger.exception(
            "Error handler %s failed for %s %s",
            getattr(handler, "__name__", handler),
            request.method,
            request.path,
        )
        return default_error_response(handler_exc, request, config)


async def handle_not_found(
    exc: NotFound,
    request: Request,
    router: Router,
    config: ServerConfig,
) -> Response:
    """Render an unmatched request with the nearest 404 handler above *router*.

    A 404 handler may return a response or raise; anything it raises is
    passed on to ``handle_error`` for the same router.
    """
    handler = router.nearest_not_found_handler()
    if handler is None:
        return await handle_error(exc, request, router, config)
    try:
        arity = len(inspect.signature(handler).parameters)
        result = await invoke(handler, *(request,)[:arity])
        return negotiate(result, method=request.method, status=exc.status)
    except Exception as raised:
        return await handle_error(raised, request, router, config)
