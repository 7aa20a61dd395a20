"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (request?, error?, config?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]

# Request hook: receives the request, may return a replacement
RequestHook: TypeAlias = Callable[..., Any]
