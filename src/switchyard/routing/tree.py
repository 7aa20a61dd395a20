"""Router tree walking — flattening and relative route keys.

All functions here are pure reads over a router tree. They never mutate
a router and never cache; a frozen tree gives the same answer every time.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from switchyard.errors import InvalidTreeError, NotAnAncestorError

if TYPE_CHECKING:
    from switchyard.routing.router import Router


def flatten_routers(top: Router) -> list[Router]:
    """Return *top* and every router below it, each exactly once.

    Depth-first, pre-order, children in registration order::

        root ─┬─ users ── {id}        [root, users, {id}, posts]
              └─ posts

    Raises:
        InvalidTreeError: If a router is reached twice (a cycle), or a
            child does not point back at the router that lists it.
    """
    result: list[Router] = []
    seen: set[int] = set()
    stack = [top]

    while stack:
        router = stack.pop()
        if id(router) in seen:
            msg = f"Cycle in router tree at {router.segment!r}."
            raise InvalidTreeError(msg)
        seen.add(id(router))
        result.append(router)

        for child in reversed(router.children):
            if child.parent is not router:
                msg = (
                    f"Router {child.segment!r} is listed under {router.segment!r} "
                    "but does not point back at it."
                )
                raise InvalidTreeError(msg)
            stack.append(child)

    return result


def iter_lineage(router: Router) -> Iterator[Router]:
    """Yield *router*, then its parent, and so on up to the tree root.

    Raises ``InvalidTreeError`` if the parent chain loops.
    """
    seen: set[int] = set()
    node: Router | None = router
    while node is not None:
        if id(node) in seen:
            msg = f"Cycle in parent chain at {node.segment!r}."
            raise InvalidTreeError(msg)
        seen.add(id(node))
        yield node
        node = node.parent


def relative_route(from_router: Router, to_router: Router) -> str:
    """Return the key of *to_router* relative to its ancestor *from_router*.

    Each segment below *from_router* contributes ``"<segment>_"``, in
    root-to-leaf order. A router relative to itself is ``"<segment>_"``,
    so a router's own endpoints always have a key::

        relative_route(api, api)          # "api_"
        relative_route(api, users)        # "users_"
        relative_route(api, user_by_id)   # "users_{id}_"

    Raises:
        NotAnAncestorError: If *from_router* is not *to_router* or one of
            its ancestors.
        InvalidTreeError: If the parent chain loops.
    """
    if from_router is to_router:
        return f"{to_router.segment}_"

    parts: list[str] = []
    for router in iter_lineage(to_router):
        if router is from_router:
            return "".join(reversed(parts))
        parts.append(f"{router.segment}_")

    msg = f"Router {from_router.segment!r} is not an ancestor of {to_router.segment!r}."
    raise NotAnAncestorError(msg)


def _is_param(part: str) -> bool:
    return part.startswith("{") and part.endswith("}")


def owning_router(top: Router, path: str) -> Router:
    """Return the deepest router under *top* whose url prefixes *path*.

    Used to pick tree-local 404 and error handlers for requests that
    matched no route. Parameter segments (``{id}``) match any single
    path part. Falls back to *top*.
    """
    parts = [p for p in path.split("/") if p]
    best = top
    best_depth = -1

    for router in flatten_routers(top):
        url_parts = [p for p in router.url.split("/") if p]
        if len(url_parts) > len(parts) or len(url_parts) <= best_depth:
            continue
        if all(u == p or _is_param(u) for u, p in zip(url_parts, parts, strict=False)):
            best = router
            best_depth = len(url_parts)

    return best
