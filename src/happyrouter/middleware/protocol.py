"""Middleware protocol, Next and MiddlewareFactory type aliases.

A middleware is any callable matching::

    async def my_mw(ctx: Context, next: Next) -> None: ...

No base class required. The framework checks the shape, not the lineage.

``next`` takes no arguments: the context is shared and mutated in place,
so everything downstream sees what upstream wrote and vice versa.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from happyrouter.context import Context

# The continuation: runs the rest of the chain
Next: TypeAlias = Callable[[], Awaitable[None]]


class Middleware(Protocol):
    """Protocol for happyrouter middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: Context, next: Next) -> None:
            start = time.monotonic()
            await next()
            ctx.set("X-Response-Time", f"{time.monotonic() - start:.3f}s")

        # Class middleware
        class RequireLogin:
            async def __call__(self, ctx: Context, next: Next) -> None:
                ...
    """

    async def __call__(self, ctx: Context, next: Next) -> None: ...


# Named, reusable middleware: called once per route with that route's
# argument value, returns the middleware to run for the route.
MiddlewareFactory: TypeAlias = Callable[[Any], Middleware]
