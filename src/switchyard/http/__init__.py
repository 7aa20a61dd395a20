"""HTTP primitives — frozen Request, chainable Response, and their parts."""

from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]
