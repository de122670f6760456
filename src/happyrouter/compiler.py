"""Route compilation — from declarations to registered chains.

For every route the compiler picks the registered middlewares the route
switches on, orders them, instantiates them with the route's arguments,
appends the route-local middlewares and the error-bounded handler, and
registers the finished chain with the router.

Selection and ordering:

1. Candidates are the route's extra fields that name a registered
   middleware. Reserved fields (``url``, ``method``, ``middlewares``,
   ``handler``) never count, even if a middleware was registered under
   that name.
2. With a declared order, candidates are taken in that order and any
   candidate missing from it is dropped. Without one, candidates keep the
   route's field order.
3. Route-local middlewares follow, untouched, then the handler.

Chains are built from the registry as it is at compile time; later
registrations don't reach routes that were already compiled.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from happyrouter._internal.types import ErrorHandler
from happyrouter.boundary import wrap
from happyrouter.methods import RESERVED_FIELDS, RequestMethod, resolve_method
from happyrouter.middleware.registry import MiddlewareRegistry
from happyrouter.spec import RouteSpec, as_route_spec
from happyrouter.routing.router import Router

logger = logging.getLogger("happyrouter.compiler")


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A chain as submitted to the router."""

    method: RequestMethod
    url: str
    chain: tuple[Callable[..., Any], ...]


class RouteCompiler:
    """Builds route chains from a registry and hands them to a router."""

    __slots__ = ("error_handler", "registry")

    def __init__(
        self,
        registry: MiddlewareRegistry,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.registry = registry
        self.error_handler = error_handler

    def resolve_keys(self, spec: RouteSpec) -> list[str]:
        """Names of the registered middlewares this route runs, in order."""
        candidates = [
            key for key in spec.fields if key not in RESERVED_FIELDS and key in self.registry
        ]
        order = self.registry.order
        if not order:
            return candidates

        keys = [key for key in order if key in candidates]
        dropped = [key for key in candidates if key not in keys]
        if dropped:
            logger.debug(
                "Route %s uses middlewares missing from the declared order: %s",
                spec.url,
                ", ".join(dropped),
            )
        return keys

    def build_chain(self, spec: RouteSpec) -> tuple[Callable[..., Any], ...]:
        """Instantiate the registry middlewares, then local ones, then the handler."""
        chain: list[Callable[..., Any]] = []
        for key in self.resolve_keys(spec):
            factory = self.registry.get(key)
            assert factory is not None
            chain.append(factory(spec.fields[key]))

        chain.extend(spec.middlewares)

        if spec.handler is not None:
            chain.append(wrap(spec.handler, self.error_handler))
        return tuple(chain)

    def compile(
        self,
        routes: Iterable[RouteSpec | Mapping[str, Any]],
        router: Router,
    ) -> list[CompiledRoute]:
        """Compile every route and register it with ``router``."""
        compiled: list[CompiledRoute] = []
        for item in routes:
            spec = as_route_spec(item)
            method = resolve_method(spec.method)
            chain = self.build_chain(spec)

            unused = [
                key
                for key in spec.fields
                if key not in RESERVED_FIELDS and key not in self.registry
            ]
            if unused:
                logger.debug("Route %s fields with no middleware: %s", spec.url, ", ".join(unused))

            router.register(method.value, spec.url, chain)
            compiled.append(CompiledRoute(method=method, url=spec.url, chain=chain))
        return compiled
