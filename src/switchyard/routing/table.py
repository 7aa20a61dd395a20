"""Compiled route table with trie-based path matching.

Built once from a router tree when the app freezes. Every route on every
router is inserted under its absolute url; a match carries the route,
the router that owns it, and the captured path parameters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from switchyard.errors import ConfigurationError, MethodNotAllowed, NotFound
from switchyard.routing.params import CONVERTERS
from switchyard.routing.route import PathSegment, Route, RouteMatch
from switchyard.routing.router import join_url
from switchyard.routing.tree import flatten_routers

if TYPE_CHECKING:
    from switchyard.routing.router import Router


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                "Switchyard path parameters are written as {param}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Route {path!r}: unknown parameter type {param_type!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def _check_same_param(existing: str, segment: str, path: str) -> None:
    """Only one parameter pattern per trie level: ``{id:int}`` and ``{name}`` cannot be siblings."""
    if existing != segment:
        msg = (
            f"Route {path!r}: parameter segment {segment!r} conflicts with "
            f"{existing!r} at the same position."
        )
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class _Target:
    """A route and the router it was registered on."""

    route: Route
    router: Router


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "targets")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Targets at this node, keyed by HTTP method
        self.targets: dict[str, _Target] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    segment: str
    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge — consumes remaining path."""

    segment: str
    param_name: str
    targets: dict[str, _Target]


class RouteTable:
    """Trie over the absolute urls of a router tree.

    Usage::

        table = RouteTable.from_tree(root)
        match = table.match("GET", "/api/users/42")
        match.router      # the Router that registered the route
        match.path_params # {"id": "42"}
    """

    __slots__ = ("_root", "_size")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @classmethod
    def from_tree(cls, top: Router) -> RouteTable:
        """Compile every route of *top* and its descendants."""
        table = cls()
        for router in flatten_routers(top):
            base = router.url
            for route in router.routes:
                table.add(join_url(base, route.path), route, router)
        return table

    def add(self, path: str, route: Route, router: Router) -> None:
        """Insert *route* under the absolute *path*.

        Raises ``ConfigurationError`` if another route already handles
        one of its methods at the same path, or if a different parameter
        segment already occupies the same position.
        """
        target = _Target(route, router)
        node = self._root

        for seg in parse_path(path):
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        segment=seg.value,
                        param_name=seg.param_name or "path",
                        targets={},
                    )
                _check_same_param(node.catch_all.segment, seg.value, path)
                self._register(node.catch_all.targets, path, target)
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        segment=seg.value,
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                _check_same_param(node.param_child.segment, seg.value, path)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._register(node.targets, path, target)

    def _register(self, targets: dict[str, _Target], path: str, target: _Target) -> None:
        for method in target.route.methods:
            if method in targets:
                msg = f"Duplicate route: {method} {path} is registered twice."
                raise ConfigurationError(msg)
            targets[method] = target
        self._size += 1

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        targets, params = result
        target = targets.get(method)
        if target is None and method == "HEAD":
            target = targets.get("GET")
        if target is not None:
            return RouteMatch(
                route=target.route,
                router=target.router,
                method=method if method in target.route.methods else "GET",
                path_params=params,
            )

        raise MethodNotAllowed(frozenset(targets))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, _Target], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed: return this node's targets
        if index == len(parts):
            if node.targets:
                return node.targets, params
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Try parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        # 3. Try catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.targets, {**params, node.catch_all.param_name: remaining}

        return None
