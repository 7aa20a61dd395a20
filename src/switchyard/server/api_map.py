"""The api map endpoint — every route below a router, as JSON."""

from switchyard._internal.types import Handler
from switchyard.http.response import Response
from switchyard.routing.endpoints import build_endpoint_map
from switchyard.routing.router import Router


def map_handler(top: Router) -> Handler:
    """Return a handler that serves the endpoint map of *top*.

    The map is rebuilt on every request; nothing is cached. Tree errors
    propagate to the owning tree's error handler as a 500.
    """

    def api_map() -> Response:
        return Response.json_body(build_endpoint_map(top))

    return api_map
