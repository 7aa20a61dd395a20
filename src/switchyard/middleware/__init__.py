"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    add_existence_props -- parse the body and flag which request sections are present
"""

from switchyard.middleware.existence import add_existence_props
from switchyard.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next", "add_existence_props"]
