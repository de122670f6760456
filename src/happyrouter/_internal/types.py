"""Shared type aliases used across happyrouter modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: ``(ctx)`` or ``(ctx, next)``, sync or async
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives ``(error, ctx)``; its return value is ignored
ErrorHandler: TypeAlias = Callable[..., Any]
