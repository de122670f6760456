"""Router — registers middleware chains by method and path.

Routes are plain chains: whatever middlewares were registered for a
pattern run in order, and the end of the chain continues downstream.
Pattern compilation and parameter conversion are starlette's
(``{name}``, ``{name:int}``, ``{name:path}``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from happyrouter.chain import compose
from happyrouter.context import Context
from happyrouter.errors import MethodNotAllowed, NotImplementedMethod
from happyrouter.methods import DEFAULT_METHODS, RequestMethod
from happyrouter.middleware.protocol import Next
from happyrouter.routing.layer import Layer, RouteMatch


class Router:
    """Method/path dispatch over registered middleware chains.

    Usage::

        router = Router(prefix="/api")
        router.register("GET", "/users/{id:int}", [load_user, show_user])
        app.use(router.routes()).use(router.allowed_methods())

    Middlewares added with ``use()`` run for every request, in call order,
    before matching.
    """

    __slots__ = ("_layers", "_pre_match", "methods", "prefix", "strict")

    def __init__(
        self,
        *,
        prefix: str = "",
        strict: bool = False,
        methods: Iterable[str] = DEFAULT_METHODS,
    ) -> None:
        self.prefix = prefix
        self.strict = strict
        self.methods: tuple[str, ...] = tuple(m.upper() for m in methods)
        self._layers: list[Layer] = []
        self._pre_match: list[Callable[..., Any]] = []

    @property
    def layers(self) -> tuple[Layer, ...]:
        """Every registered layer, in registration order."""
        return tuple(self._layers)

    def register(
        self,
        method: str | Iterable[str],
        path: str,
        middlewares: Sequence[Callable[..., Any]],
    ) -> Layer:
        """Register a chain for ``method`` (or ``"ALL"``) at ``path``.

        ``GET`` routes answer ``HEAD`` as well.
        """
        if isinstance(method, str):
            names = [method.upper()]
        else:
            names = [m.upper() for m in method]

        methods: list[str] = []
        for name in names:
            expanded = self.methods if name == RequestMethod.ALL else (name,)
            for m in expanded:
                if m not in methods:
                    methods.append(m)
        if "GET" in methods and "HEAD" not in methods:
            methods.insert(0, "HEAD")

        layer = Layer(
            path=self._prefixed(path),
            methods=tuple(methods),
            stack=tuple(middlewares),
            strict=self.strict,
        )
        self._layers.append(layer)
        return layer

    def _prefixed(self, path: str) -> str:
        if not self.prefix:
            return path or "/"
        # A bare "/" under a prefix is the prefix itself unless matching strictly
        if path in ("", "/") and not self.strict:
            return self.prefix
        return f"{self.prefix}{path}"

    def use(self, *middleware: Callable[..., Any]) -> Router:
        """Append middlewares to the pre-match stage. Chainable."""
        self._pre_match.extend(middleware)
        return self

    def match(self, path: str, method: str) -> RouteMatch:
        """Find the layers matching ``path``, and those accepting ``method``."""
        on_path: list[Layer] = []
        on_path_and_method: list[Layer] = []
        route = False

        for layer in self._layers:
            if not layer.match(path):
                continue
            on_path.append(layer)
            if not layer.methods or method in layer.methods:
                on_path_and_method.append(layer)
                if layer.methods:
                    route = True

        return RouteMatch(
            path=tuple(on_path),
            path_and_method=tuple(on_path_and_method),
            route=route,
        )

    def routes(self) -> Callable[..., Any]:
        """Return a middleware that dispatches requests to matching chains."""

        async def dispatch(ctx: Context, next: Next) -> None:
            matched = self.match(ctx.path, ctx.method)
            ctx.matched.extend(matched.path)

            if not matched.route:
                await next()
                return

            chain: list[Callable[..., Any]] = []
            for layer in matched.path_and_method:
                chain.append(layer.capture)
                chain.extend(layer.stack)
            await compose(chain)(ctx, next)

        async def routes(ctx: Context, next: Next) -> None:
            await compose([*self._pre_match, dispatch])(ctx, next)

        return routes

    def allowed_methods(
        self,
        *,
        throw: bool = False,
        not_implemented: Callable[[], Exception] | None = None,
        method_not_allowed: Callable[[], Exception] | None = None,
    ) -> Callable[..., Any]:
        """Return a middleware answering ``OPTIONS``, 405 and 501.

        Runs after everything downstream and only touches responses that
        are still 404. With ``throw=True`` it raises instead of setting
        the status; ``not_implemented`` / ``method_not_allowed`` build the
        exception to raise.
        """
        implemented = self.methods

        async def allowed(ctx: Context, next: Next) -> None:
            await next()

            if ctx.status != 404:
                return

            allowed_methods: dict[str, None] = {}
            for layer in ctx.matched:
                for method in layer.methods:
                    allowed_methods[method] = None
            allow = ", ".join(allowed_methods)

            if ctx.method not in implemented:
                if throw:
                    raise not_implemented() if not_implemented else NotImplementedMethod()
                ctx.status = 501
                ctx.set("Allow", allow)
            elif allowed_methods:
                if ctx.method == "OPTIONS":
                    ctx.status = 200
                    ctx.body = ""
                    ctx.set("Allow", allow)
                elif ctx.method not in allowed_methods:
                    if throw:
                        raise (
                            method_not_allowed()
                            if method_not_allowed
                            else MethodNotAllowed(allowed_methods)
                        )
                    ctx.status = 405
                    ctx.set("Allow", allow)

        return allowed
