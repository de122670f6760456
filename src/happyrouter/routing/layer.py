"""Layer and RouteMatch — one registered chain and a match result."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from starlette.convertors import Convertor
from starlette.routing import compile_path

from happyrouter.context import Context


def normalize_path(path: str) -> str:
    """Drop one trailing slash, keeping the root path intact."""
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


@dataclass(slots=True)
class Layer:
    """A path pattern, the methods it answers and its middleware chain.

    Created by ``Router.register``. The chain is frozen into a tuple; to
    change it, register again.
    """

    path: str
    methods: tuple[str, ...]
    stack: tuple[Callable[..., Any], ...]
    strict: bool = False
    regex: re.Pattern[str] = field(init=False, repr=False)
    convertors: dict[str, Convertor[Any]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        pattern = self.path if self.strict else normalize_path(self.path)
        self.regex, _, self.convertors = compile_path(pattern)

    def match(self, path: str) -> bool:
        if not self.strict:
            path = normalize_path(path)
        return self.regex.match(path) is not None

    def params(self, path: str) -> dict[str, Any]:
        """Extract and convert the path parameters of a matching path."""
        if not self.strict:
            path = normalize_path(path)
        found = self.regex.match(path)
        if found is None:
            return {}
        return {
            name: self.convertors[name].convert(value)
            for name, value in found.groupdict().items()
        }

    async def capture(self, ctx: Context, next: Callable[..., Any]) -> None:
        """Chain step that exposes this layer's params before its stack runs."""
        ctx.params = self.params(ctx.path)
        ctx.route_path = self.path
        await next()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of matching a request against a router.

    ``path`` holds every layer whose pattern matched, ``path_and_method``
    the subset that also accepts the request method. ``route`` is true when
    at least one of those carries methods, i.e. a real route was hit.
    """

    path: tuple[Layer, ...]
    path_and_method: tuple[Layer, ...]
    route: bool
