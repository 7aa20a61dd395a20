"""Switchyard exception hierarchy.

Shared across the router tree, the endpoint map builder, the App, and
middleware so every module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when app configuration or route registration is invalid.

    Typically raised at registration time or during ``App._freeze()``.
    """


class InvalidTreeError(SwitchyardError):
    """The router tree is structurally corrupt.

    Raised when a cycle is found while walking the tree, or when a
    parent/child link does not agree in both directions.
    """


class NotAnAncestorError(SwitchyardError):
    """A relative route was requested between two unrelated routers.

    ``relative_route(a, b)`` requires ``a`` to be ``b`` or one of its
    ancestors. Anything else is a programming error.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by the route table, middleware, or handlers. The ASGI handler
    catches these and dispatches to the owning router tree's handlers.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods and embeds
    the allowed methods in the detail string for developer visibility.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
