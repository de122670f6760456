"""Invoke helpers — call sync or async callables uniformly.

Handlers, middleware and error handlers can be ``def`` or ``async def``.
Any code that calls a user-provided callable goes through ``invoke`` so the
sync/async check lives in exactly one place.

Usage::

    from happyrouter._internal.invoke import invoke

    result = await invoke(handler, ctx, next)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def index(ctx):
            ctx.body = "Hello"

        # async: returns a coroutine, awaited here
        async def index(ctx):
            ctx.body = await load_page()
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_next(func: Any) -> bool:
    """Whether ``func`` takes a second positional argument for the continuation.

    Handlers may be written as ``(ctx)`` or ``(ctx, next)``. Callables whose
    signature can't be inspected are assumed to accept both.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return True

    positional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2
