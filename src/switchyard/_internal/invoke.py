"""Invoke helper — call sync or async callables uniformly.

Route handlers, error handlers, and request hooks can all be ``def`` or
``async def``. The sync/async check lives here and nowhere else.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable.

    ::

        def list_users():           # sync — result used as-is
            return [{"id": 1}]

        async def list_users():     # async — awaited here
            return await repo.all()
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
