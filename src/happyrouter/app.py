"""happyrouter host application.

A small koa-style ASGI app: an ordered middleware list composed into one
onion, run once per request against a fresh ``Context``.

Mutable during setup (``use``, lifecycle hooks). Frozen when the first
ASGI event arrives.
"""

from __future__ import annotations

import inspect
import logging
import threading
import traceback
from collections.abc import Callable
from typing import Any

from happyrouter._internal.asgi import Receive, Scope, Send
from happyrouter.chain import Composed, compose
from happyrouter.config import AppConfig
from happyrouter.context import Context, context_var
from happyrouter.errors import ConfigurationError, HTTPError

logger = logging.getLogger("happyrouter.server")


class App:
    """The host application.

    Usage::

        app = App()
        app.use(router.routes()).use(router.allowed_methods())

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread composes the middleware, even
        when several workers deliver their first request concurrently.
    """

    __slots__ = (
        "_composed",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._middleware_list: list[Callable[..., Any]] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._composed: Composed | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Middleware --

    def use(self, middleware: Callable[..., Any]) -> App:
        """Append a middleware. Chainable."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)
        return self

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        self._ensure_frozen()
        assert self._composed is not None

        ctx = Context.from_asgi(scope, receive)
        token = context_var.set(ctx)
        try:
            await self._composed(ctx)
        except HTTPError as exc:
            self._apply_http_error(ctx, exc)
        except Exception as exc:
            self._apply_internal_error(ctx, exc)
        finally:
            context_var.reset(token)

        response = ctx.to_response()
        await response(scope, receive, send)

    def _apply_http_error(self, ctx: Context, exc: HTTPError) -> None:
        logger.debug("%d %s %s — %s", exc.status, ctx.method, ctx.path, exc.detail)
        ctx.status = exc.status
        ctx.body = exc.detail or f"Error {exc.status}"
        for name, value in exc.headers:
            ctx.set(name, value)

    def _apply_internal_error(self, ctx: Context, exc: Exception) -> None:
        logger.exception("500 %s %s", ctx.method, ctx.path)
        ctx.response_headers.clear()
        ctx.status = 500
        if self.config.debug:
            ctx.body = "".join(traceback.format_exception(exc))
        else:
            ctx.body = "Internal Server Error"

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol."""
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._composed = compose(tuple(self._middleware_list))
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add middleware and hooks before the first request."
            )
            raise ConfigurationError(msg)
