"""HappyRouter — declarative routes with named, centrally ordered middleware.

Usage::

    from happyrouter import App, HappyRouter, RouterConfig

    app = App()
    router = HappyRouter(RouterConfig(prefix="/api"))

    router.sort_middlewares(["auth", "demo"])
    router.register_middlewares({
        "demo": lambda options: demo_middleware(options),
        "auth": lambda required: require_login if required else passthrough,
    })

    router.add_routes([
        {
            "url": "/",
            "method": "GET",
            "demo": {"text": "auth runs before demo"},
            "auth": True,
            "handler": lambda ctx: setattr(ctx, "body", "Hello World"),
        },
    ])

    app.use(router.routes()).use(router.allowed_methods())

Register middlewares and declare their order before adding routes:
routes are compiled when they're added.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from happyrouter.compiler import CompiledRoute, RouteCompiler
from happyrouter.config import RouterConfig
from happyrouter.middleware.logger import request_logger
from happyrouter.middleware.protocol import MiddlewareFactory
from happyrouter.middleware.registry import MiddlewareRegistry
from happyrouter.spec import RouteSpec
from happyrouter.routing.router import Router


class HappyRouter:
    """A router instance with its own middleware registry and ordering.

    Every instance is independent: two routers never share registered
    middlewares, ordering, or routes.
    """

    __slots__ = ("_compiled", "_compiler", "config", "registry", "router")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.registry = MiddlewareRegistry()
        self.router = Router(
            prefix=self.config.prefix,
            strict=self.config.strict,
            methods=self.config.methods,
        )
        self._compiler = RouteCompiler(self.registry, self.config.error_handler)
        self._compiled: list[CompiledRoute] = []

        if self.config.logger:
            self.router.use(request_logger)

    @property
    def compiled(self) -> tuple[CompiledRoute, ...]:
        """Every route compiled so far, in order."""
        return tuple(self._compiled)

    def add_routes(self, routes: Iterable[RouteSpec | Mapping[str, Any]]) -> None:
        """Compile routes and register them.

        Accepts ``RouteSpec`` objects and plain mappings::

            router.add_routes([
                {"url": "/", "method": "GET", "handler": index},
                route("/user", method="POST", permit=True, handler=create_user),
            ])
        """
        self._compiled.extend(self._compiler.compile(routes, self.router))

    def sort_middlewares(self, keys: Iterable[str] = ()) -> None:
        """Declare the execution order of registered middlewares.

        Once any order is declared, a route only runs the registered
        middlewares that appear in it.
        """
        self.registry.declare_order(keys)

    def register_middlewares(self, middlewares: Mapping[str, MiddlewareFactory]) -> None:
        """Register middleware factories by name. Re-registering overwrites."""
        self.registry.register(middlewares)

    def use(self, *middleware: Callable[..., Any]) -> HappyRouter:
        """Run middlewares for every request, before route matching. Chainable."""
        self.router.use(*middleware)
        return self

    def routes(self) -> Callable[..., Any]:
        """Return the middleware that dispatches requests to matching routes."""
        return self.router.routes()

    def allowed_methods(
        self,
        *,
        throw: bool = False,
        not_implemented: Callable[[], Exception] | None = None,
        method_not_allowed: Callable[[], Exception] | None = None,
    ) -> Callable[..., Any]:
        """Return the middleware answering ``OPTIONS`` and 405/501 responses."""
        return self.router.allowed_methods(
            throw=throw,
            not_implemented=not_implemented,
            method_not_allowed=method_not_allowed,
        )
