"""Switchyard — composable router trees for ASGI, with a built-in api map.

Two router trees, ``root`` and ``api``, each with its own 404 and error
handling. Every request is annotated with existence flags for its body,
path params and query. ``GET /api`` returns a map of every api route and
the methods it accepts.

Basic usage::

    from switchyard import App, ServerConfig

    app = App(ServerConfig(host="localhost", port=5000, url="http://localhost:5000"))
    users = app.api.create_child("users")

    @users.route("/{id:int}", methods=["GET", "DELETE"])
    def user(request, id: int):
        ...

Serve ``app`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "Endpoint",
    "HTTPError",
    "InvalidTreeError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotAnAncestorError",
    "NotFound",
    "Request",
    "Response",
    "Route",
    "Router",
    "ServerConfig",
    "StatusCodes",
    "SwitchyardError",
    "add_existence_props",
    "build_endpoint_map",
    "flatten_routers",
    "relative_route",
]

# name -> module holding it; resolved on first attribute access
_LAZY_IMPORTS: dict[str, str] = {
    "App": "switchyard.app",
    "ConfigurationError": "switchyard.errors",
    "Endpoint": "switchyard.routing.endpoints",
    "HTTPError": "switchyard.errors",
    "InvalidTreeError": "switchyard.errors",
    "MethodNotAllowed": "switchyard.errors",
    "Middleware": "switchyard.middleware.protocol",
    "Next": "switchyard.middleware.protocol",
    "NotAnAncestorError": "switchyard.errors",
    "NotFound": "switchyard.errors",
    "Request": "switchyard.http.request",
    "Response": "switchyard.http.response",
    "Route": "switchyard.routing.route",
    "Router": "switchyard.routing.router",
    "ServerConfig": "switchyard.config",
    "StatusCodes": "switchyard.status",
    "SwitchyardError": "switchyard.errors",
    "add_existence_props": "switchyard.middleware.existence",
    "build_endpoint_map": "switchyard.routing.endpoints",
    "flatten_routers": "switchyard.routing.tree",
    "relative_route": "switchyard.routing.tree",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
