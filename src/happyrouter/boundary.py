"""Error boundary around route handlers.

``wrap`` turns a handler into the terminal step of a route chain. With an
error handler, an exception raised by the handler (sync or async) is
passed to ``error_handler(error, ctx)`` and goes no further; the request
continues with whatever the error handler wrote onto the context. Without
one, the exception propagates unchanged.

Only ``Exception`` is caught. Cancellation and other ``BaseException``
subclasses always propagate.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any

from happyrouter._internal.invoke import accepts_next, invoke
from happyrouter._internal.types import ErrorHandler, Handler
from happyrouter.context import Context
from happyrouter.middleware.protocol import Next

logger = logging.getLogger("happyrouter.boundary")


def wrap(handler: Handler, error_handler: ErrorHandler | None = None) -> Callable[..., Any]:
    """Return a ``(ctx, next)`` middleware that runs ``handler`` once."""
    pass_next = accepts_next(handler)

    @functools.wraps(handler)
    async def bounded(ctx: Context, next: Next) -> None:
        args = (ctx, next) if pass_next else (ctx,)
        if error_handler is None:
            await invoke(handler, *args)
            return

        try:
            await invoke(handler, *args)
        except Exception as exc:
            logger.debug("Handler error on %s %s: %r", ctx.method, ctx.path, exc)
            await invoke(error_handler, exc, ctx)

    return bounded
