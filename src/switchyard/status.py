"""Canonical HTTP status codes for common responses.

One table shared by the response pipeline and the error handlers, so a
POST that creates something and a 404 from the api tree always agree
on their numbers.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SuccessCodes:
    """Status codes for successful responses, per HTTP method."""

    default: int = 200
    no_content: int = 204
    get: int = 200
    put: int = 200
    patch: int = 200
    post: int = 201
    delete: int = 204

    def for_method(self, method: str) -> int:
        """Return the success status for *method*, falling back to ``default``.

        ``HEAD`` and ``OPTIONS`` have no dedicated entry and use ``default``.
        """
        name = method.lower()
        if name in _METHOD_FIELDS:
            return getattr(self, name)
        return self.default


@dataclass(frozen=True, slots=True)
class ErrorCodes:
    """Status codes for error responses."""

    user: int = 400
    authenticate: int = 401
    authorise: int = 403
    missing: int = 404
    default: int = 500


_METHOD_FIELDS = frozenset({"get", "put", "patch", "post", "delete"})


@dataclass(frozen=True, slots=True)
class StatusCodeTable:
    """HTTP status codes, grouped into ``success`` and ``error``.

    Usage::

        from switchyard.status import StatusCodes

        StatusCodes.success.post      # 201
        StatusCodes.error.missing     # 404
    """

    success: SuccessCodes = SuccessCodes()
    error: ErrorCodes = ErrorCodes()


StatusCodes = StatusCodeTable()
