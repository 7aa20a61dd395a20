"""Switchyard application — the root and api router trees behind one ASGI app.

Mutable during setup (routers, middleware, request hooks).
Frozen at runtime when ``__call__()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import RequestHook
from switchyard.config import ServerConfig
from switchyard.middleware.existence import add_existence_props
from switchyard.middleware.protocol import Middleware
from switchyard.routing.router import Router
from switchyard.routing.table import RouteTable
from switchyard.routing.tree import flatten_routers
from switchyard.server.api_map import map_handler
from switchyard.server.errors import (
    api_generic_error_handler,
    api_not_found_handler,
    root_generic_error_handler,
    root_not_found_handler,
)
from switchyard.server.handler import handle_request

logger = logging.getLogger("switchyard.server")


class App:
    """The switchyard application.

    Exposes two router trees: ``root`` (mounted at ``/``) and ``api``
    (mounted at ``/api``, a child of ``root``). Each has its own 404 and
    error handlers — the api tree answers in JSON, the root tree with a
    bare status::

        app = App(ServerConfig(host="localhost", port=5000, url="http://localhost:5000"))
        users = app.api.create_child("users")

        @users.route("/", methods=["GET", "POST"])
        async def users_index(request: Request):
            ...

    ``GET /api`` returns the endpoint map of the api tree.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the route table, even when several ASGI workers
        receive their first request at once.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_request_hooks",
        # Compiled state (populated by _freeze)
        "_table",
        "api",
        "config",
        "root",
    )

    def __init__(self, config: ServerConfig) -> None:
        self.config: ServerConfig = config
        self.root: Router = Router()
        self.api: Router = self.root.create_child("api")
        self._middleware_list: list[Middleware] = [add_existence_props]
        self._request_hooks: list[RequestHook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        self.root.on_not_found(root_not_found_handler)
        self.root.on_error(root_generic_error_handler)
        self.api.on_not_found(api_not_found_handler)
        self.api.on_error(api_generic_error_handler)

        # Compiled state — set during _freeze()
        self._table: RouteTable | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    @property
    def url(self) -> str:
        """The public URL of the server."""
        return self.config.url

    # -- Middleware & hooks --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline.

        Middleware runs for matched routes, after path params are known,
        in registration order. ``add_existence_props`` is always first.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_request(self, hook: RequestHook) -> RequestHook:
        """Register a request hook via decorator.

        Hooks run before middleware. A hook may return a replacement
        ``Request``; returning ``None`` keeps the current one.
        """
        self._check_not_frozen()
        self._request_hooks.append(hook)
        return hook

    # -- Introspection --

    @property
    def routers(self) -> list[Router]:
        """Every router in the app, root first."""
        return flatten_routers(self.root)

    @property
    def table(self) -> RouteTable:
        """The compiled route table. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._table is not None
        return self._table

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._table is not None

        await handle_request(
            scope,
            receive,
            send,
            table=self._table,
            root=self.root,
            middleware=self._middleware,
            request_hooks=tuple(self._request_hooks),
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Compile at startup so registration errors surface before traffic."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Freeze the app if not already frozen. Thread-safe."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Mount the api map, compile the route table, freeze every router."""
        if self.config.expose_api_map and not self._api_root_taken():
            self.api.add_route("/", {"GET": map_handler(self.api)})

        table = RouteTable.from_tree(self.root)
        routers = flatten_routers(self.root)
        for router in routers:
            router.freeze()

        self._table = table
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug("Compiled %d routes across %d routers", len(table), len(routers))

    def _api_root_taken(self) -> bool:
        return any(route.path.strip("/") == "" and "GET" in route.methods for route in self.api.routes)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise RuntimeError(msg)
