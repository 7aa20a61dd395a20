"""Route descriptors and match results.

A ``Route`` is the metadata for one registered endpoint: a url suffix
and the handlers it accepts, keyed by HTTP method. The method set is
derived once, when the route is built, and validated there.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from switchyard._internal.types import Handler
from switchyard.errors import ConfigurationError

if TYPE_CHECKING:
    from switchyard.routing.router import Router

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"}
)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True, eq=False)
class Route:
    """A frozen route definition, registered directly on one router.

    ``path`` is the suffix appended to the owning router's url. ``methods``
    is derived from ``handlers`` and is never empty::

        Route("/{id}", {"GET": get_user, "delete": delete_user})
        # methods == frozenset({"GET", "DELETE"})
    """

    path: str
    handlers: Mapping[str, Handler]
    methods: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        if not self.handlers:
            msg = f"Route {self.path!r} has no handlers."
            raise ConfigurationError(msg)

        normalized: dict[str, Handler] = {}
        for method, handler in self.handlers.items():
            upper = method.upper()
            if upper not in HTTP_METHODS:
                msg = f"Route {self.path!r}: unknown HTTP method {method!r}."
                raise ConfigurationError(msg)
            if upper in normalized:
                msg = f"Route {self.path!r}: method {upper} registered twice."
                raise ConfigurationError(msg)
            if not callable(handler):
                msg = f"Route {self.path!r}: handler for {upper} is not callable."
                raise ConfigurationError(msg)
            normalized[upper] = handler

        # Frozen + slots: assign through object.__setattr__ once, at construction
        object.__setattr__(self, "handlers", MappingProxyType(normalized))
        object.__setattr__(self, "methods", frozenset(normalized))

    def with_handlers(self, handlers: Mapping[str, Handler]) -> Route:
        """Return a new Route with *handlers* merged in.

        Raises ``ConfigurationError`` if a method is already handled.
        """
        for method in handlers:
            if method.upper() in self.methods:
                msg = f"Route {self.path!r}: method {method.upper()} registered twice."
                raise ConfigurationError(msg)
        return Route(self.path, {**self.handlers, **handlers})


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    router: Router
    method: str
    path_params: dict[str, str]

    @property
    def handler(self) -> Handler:
        """The handler registered for the matched method."""
        return self.route.handlers[self.method]
