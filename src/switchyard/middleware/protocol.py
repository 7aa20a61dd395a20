"""The middleware calling convention.

Middleware wraps the matched handler: it receives the request and the
rest of the chain, and returns the response. ``add_existence_props`` is
the first link of every app's chain::

    async def add_existence_props(request: Request, next: Next) -> Response:
        body = drop_absent(await read_body_data(request))
        return await next(replace(request, body_data=body, has_body=section_exists(body)))

A middleware may also answer on its own without calling ``next``, e.g.
to refuse a request before the handler sees it.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from switchyard.http.request import Request
from switchyard.http.response import Response

# Rest of the chain, ending in the route handler
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Anything awaitable as ``middleware(request, next)`` returning a Response.

    Plain ``async def`` functions qualify; so do objects with an async
    ``__call__``, for middleware that carries settings::

        class RequireBody:
            def __init__(self, methods: frozenset[str]) -> None:
                self.methods = methods

            async def __call__(self, request: Request, next: Next) -> Response:
                if request.method in self.methods and not request.has_body:
                    return Response.json_body({"message": "Body required"}, status=400)
                return await next(request)

        app.add_middleware(RequireBody(frozenset({"POST", "PUT"})))
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
