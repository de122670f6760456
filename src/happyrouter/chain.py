"""Onion-style middleware composition.

``compose`` turns an ordered list of ``(ctx, next)`` middlewares into a
single ``(ctx, next)`` callable. Each middleware suspends at ``await next()``
and resumes once everything downstream has finished::

    chain = compose([timing, auth, handler])
    await chain(ctx)

When the last middleware calls its continuation, the outer ``next`` (if
any) runs, which lets a composed chain sit inside another one.
"""

from collections.abc import Awaitable, Callable, Iterable
from functools import partial
from typing import Any, TypeAlias

from happyrouter._internal.invoke import invoke
from happyrouter.context import Context

Composed: TypeAlias = Callable[..., Awaitable[None]]


def compose(middleware: Iterable[Callable[..., Any]]) -> Composed:
    """Compose middlewares into one callable, first element outermost."""
    stack = tuple(middleware)

    async def composed(ctx: Context, next: Callable[[], Awaitable[None]] | None = None) -> None:
        index = -1

        async def dispatch(i: int) -> None:
            nonlocal index
            if i <= index:
                msg = "next() called multiple times"
                raise RuntimeError(msg)
            index = i
            if i == len(stack):
                if next is not None:
                    await next()
                return
            await invoke(stack[i], ctx, partial(dispatch, i + 1))

        await dispatch(0)

    return composed
