"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: Context, next: Next) -> None

Named middlewares are registered as factories on a router and switched
on per route by a route field of the same name.

Built-in middleware:
    request_logger -- Log request start/finish lines (``RouterConfig(logger=True)``)
"""

from happyrouter.middleware.logger import request_logger
from happyrouter.middleware.protocol import Middleware, MiddlewareFactory, Next
from happyrouter.middleware.registry import MiddlewareRegistry

__all__ = [
    "Middleware",
    "MiddlewareFactory",
    "MiddlewareRegistry",
    "Next",
    "request_logger",
]
