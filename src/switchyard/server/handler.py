"""ASGI handler — translates ASGI scope/messages to switchyard types.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, matches it against the compiled route table, runs
request hooks and middleware, and sends the Response back through
ASGI send().

Errors are rendered by the router tree that owns the request: the
matched router, or for unmatched paths the deepest router whose url
prefixes the request path.
"""

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.invoke import invoke
from switchyard._internal.types import RequestHook
from switchyard.config import ServerConfig
from switchyard.errors import NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next
from switchyard.routing.route import RouteMatch
from switchyard.routing.router import Router
from switchyard.routing.table import RouteTable
from switchyard.routing.tree import owning_router
from switchyard.server.errors import handle_error, handle_not_found
from switchyard.server.negotiation import negotiate
from switchyard.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: RouteTable,
    root: Router,
    middleware: Sequence[Callable[..., Any]],
    request_hooks: Sequence[RequestHook],
    config: ServerConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        match = table.match(request.method, request.path)
    except NotFound as exc:
        owner = owning_router(root, request.path)
        response = await handle_not_found(exc, request, owner, config)
    except Exception as exc:
        owner = owning_router(root, request.path)
        response = await handle_error(exc, request, owner, config)
    else:
        try:
            response = await _run_pipeline(match, request, middleware, request_hooks)
        except Exception as exc:
            response = await handle_error(exc, request, match.router, config)

    await send_response(response, send, include_body=request.method != "HEAD")


async def _run_pipeline(
    match: RouteMatch,
    request: Request,
    middleware: Sequence[Callable[..., Any]],
    request_hooks: Sequence[RequestHook],
) -> Response:
    """Hooks, then middleware, then the matched handler."""
    request = request.with_path_params(match.path_params)

    for hook in request_hooks:
        replaced = await invoke(hook, request)
        if replaced is not None:
            request = replaced

    async def dispatch(req: Request) -> Response:
        return await _invoke_handler(match, req)

    # Wrap middleware around the dispatch, first registered = outermost
    handler: Next = dispatch
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = make_next

    return await handler(request)


async def _invoke_handler(match: RouteMatch, request: Request) -> Response:
    """Call the matched route handler and negotiate its return value."""
    handler = match.handler
    kwargs = _build_handler_kwargs(handler, request)
    result = await invoke(handler, **kwargs)
    return negotiate(result, method=request.method)


def _build_handler_kwargs(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Inspect the handler signature and build kwargs from the request.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted through the annotation if any)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            value = request.path_params[name]
            if param.annotation is not inspect.Parameter.empty:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value

    return kwargs
