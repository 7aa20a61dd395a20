"""Composable router tree.

Each ``Router`` owns a path segment, the routes registered directly on
it, and its child routers. Children keep a weak back-reference to their
parent; the tree owns nodes top-down, never bottom-up.

Routers are mutable during setup and frozen when the owning App starts
serving. Registration after that raises ``RuntimeError``.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Mapping

from switchyard._internal.types import ErrorHandler, Handler
from switchyard.errors import ConfigurationError, InvalidTreeError
from switchyard.routing.route import Route
from switchyard.routing.tree import flatten_routers, iter_lineage


def join_url(*parts: str) -> str:
    """Join url fragments into an absolute path.

    Empty parts and duplicate or trailing slashes collapse::

        join_url("/api", "users", "/")   -> "/api/users"
        join_url("", "/")                -> "/"
    """
    segments = [s for part in parts for s in part.split("/") if s]
    return "/" + "/".join(segments)


class Router:
    """A node in a tree of routers.

    Usage::

        root = Router()
        users = root.create_child("users")

        @users.route("/")
        def list_users():
            return [...]

        users.add_route("/{id}", {"GET": get_user, "DELETE": delete_user})

        users.url           # "/users"
        root.flatten()      # [root, users]

    Children hold their parent weakly, so keep a reference to the tree
    root. ``Router().create_child("users")`` on its own leaves ``users``
    with a dead parent, and its ``url`` raises ``InvalidTreeError``.
    """

    __slots__ = (
        "__weakref__",
        "_children",
        "_error_handler",
        "_frozen",
        "_not_found_handler",
        "_parent",
        "_routes",
        "segment",
    )

    def __init__(self, segment: str = "") -> None:
        self.segment: str = segment.strip("/")
        self._parent: weakref.ref[Router] | None = None
        self._children: list[Router] = []
        self._routes: list[Route] = []
        self._not_found_handler: Handler | None = None
        self._error_handler: ErrorHandler | None = None
        self._frozen: bool = False

    def __repr__(self) -> str:
        return f"Router({self.segment!r}, routes={len(self._routes)}, children={len(self._children)})"

    # -- Tree structure --

    @property
    def parent(self) -> Router | None:
        """The owning router, or ``None`` for a tree root.

        Raises ``InvalidTreeError`` if the parent has been garbage-collected
        while this router is still attached to it.
        """
        if self._parent is None:
            return None
        parent = self._parent()
        if parent is None:
            msg = f"Router {self.segment!r} outlived its parent."
            raise InvalidTreeError(msg)
        return parent

    @property
    def children(self) -> tuple[Router, ...]:
        """Child routers, in registration order."""
        return tuple(self._children)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Routes registered directly on this router (not on descendants)."""
        return tuple(self._routes)

    @property
    def url(self) -> str:
        """Absolute path: every segment from the tree root down to here."""
        segments = [router.segment for router in iter_lineage(self)]
        return join_url(*reversed(segments))

    def flatten(self) -> list[Router]:
        """This router and every descendant. See ``flatten_routers``."""
        return flatten_routers(self)

    def create_child(self, segment: str) -> Router:
        """Create a child router under *segment* and return it."""
        child = Router(segment)
        self.add_child(child)
        return child

    def add_child(self, child: Router) -> Router:
        """Attach an existing, detached router as a child of this one.

        Raises:
            ConfigurationError: If *child* already has a parent, would
                create a cycle, or reuses a sibling's segment.
        """
        self._check_not_frozen()
        if child._parent is not None:
            msg = f"Router {child.segment!r} is already attached to a parent."
            raise ConfigurationError(msg)
        if any(router is child for router in iter_lineage(self)):
            msg = f"Attaching {child.segment!r} under {self.segment!r} would create a cycle."
            raise ConfigurationError(msg)
        if any(existing.segment == child.segment for existing in self._children):
            msg = f"Router {self.url!r} already has a child at {child.segment!r}."
            raise ConfigurationError(msg)

        child._parent = weakref.ref(self)
        self._children.append(child)
        return child

    # -- Route registration --

    def add_route(self, path: str, handlers: Mapping[str, Handler]) -> Route:
        """Register *handlers* (method -> handler) at *path* on this router.

        A second registration for the same path merges into the existing
        route, which keeps its original position.

        Raises:
            ConfigurationError: If a method is registered twice for the
                same path, or *handlers* is empty or invalid.
        """
        self._check_not_frozen()
        target = join_url(path)
        for index, existing in enumerate(self._routes):
            if join_url(existing.path) == target:
                merged = existing.with_handlers(handlers)
                self._routes[index] = merged
                return merged

        route = Route(path, handlers)
        self._routes.append(route)
        return route

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL suffix below this router. Use ``{param}`` for path
                parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(path, dict.fromkeys(methods or ["GET"], func))
            return func

        return decorator

    # -- Tree-local error handling --

    def on_not_found(self, handler: Handler) -> Handler:
        """Set the handler for requests under this router that match no route."""
        self._check_not_frozen()
        self._not_found_handler = handler
        return handler

    def on_error(self, handler: ErrorHandler) -> ErrorHandler:
        """Set the handler for errors raised under this router."""
        self._check_not_frozen()
        self._error_handler = handler
        return handler

    def nearest_not_found_handler(self) -> Handler | None:
        """The 404 handler of this router or its closest ancestor that has one."""
        for router in iter_lineage(self):
            if router._not_found_handler is not None:
                return router._not_found_handler
        return None

    def nearest_error_handler(self) -> ErrorHandler | None:
        """The error handler of this router or its closest ancestor that has one."""
        for router in iter_lineage(self):
            if router._error_handler is not None:
                return router._error_handler
        return None

    # -- Lifecycle --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Freeze this router. No more routes, children, or handlers."""
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = f"Cannot modify router {self.segment!r} after the app has started."
            raise RuntimeError(msg)
