"""Endpoint map — every route below a router, grouped by relative key.

The map is what ``GET /api`` returns::

    {
        "users_": [{"url": "/api/users", "accepted_methods": ["GET", "POST"]}],
        "users_{id}_": [{"url": "/api/users/{id}", "accepted_methods": ["DELETE", "GET"]}]
    }

Keys are relative to the router the map is built from (see
``relative_route``), sorted lexicographically. Routers without routes
of their own are left out.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias, TypedDict

from switchyard.errors import InvalidTreeError
from switchyard.routing.router import join_url
from switchyard.routing.tree import flatten_routers, relative_route

if TYPE_CHECKING:
    from switchyard.routing.router import Router

logger = logging.getLogger("switchyard.routing")


class Endpoint(TypedDict):
    """One registered endpoint: absolute url and its sorted methods."""

    url: str
    accepted_methods: list[str]


EndpointMap: TypeAlias = dict[str, list[Endpoint]]


def router_endpoints(router: Router) -> list[Endpoint]:
    """Endpoints registered directly on *router*, in registration order."""
    base = router.url
    return [
        Endpoint(url=join_url(base, route.path), accepted_methods=sorted(route.methods))
        for route in router.routes
        if route.methods
    ]


def build_endpoint_map(top: Router) -> EndpointMap:
    """Build the endpoint map for *top* and everything below it.

    All-or-nothing: a structural problem anywhere in the tree raises
    before any part of the map is returned.

    Raises:
        InvalidTreeError: If the tree is corrupt, or two routers resolve
            to the same key.
        NotAnAncestorError: Propagated from ``relative_route``.
    """
    entries: dict[str, list[Endpoint]] = {}
    owners: dict[str, Router] = {}

    for router in flatten_routers(top):
        key = relative_route(top, router)
        endpoints = router_endpoints(router)
        if not endpoints:
            continue
        if key in entries:
            msg = (
                f"Routers {owners[key].url!r} and {router.url!r} "
                f"both map to endpoint key {key!r}."
            )
            raise InvalidTreeError(msg)
        entries[key] = endpoints
        owners[key] = router

    logger.debug("Endpoint map for %s: %d keys", top.url, len(entries))
    return {key: entries[key] for key in sorted(entries)}
