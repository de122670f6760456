"""Route declarations.

A route is a URL, an optional method, an optional handler, optional
route-local middlewares, and any number of extra fields. Extra fields
whose names match a registered middleware carry that middleware's
argument for the route; the rest is pass-through metadata.

Three equivalent ways to declare one::

    RouteSpec("/users", method="POST", handler=create_user, fields={"auth": True})
    route("/users", method="POST", handler=create_user, auth=True)
    RouteSpec.from_mapping({"url": "/users", "method": "POST", "auth": True, ...})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from happyrouter._internal.types import Handler
from happyrouter.methods import RESERVED_FIELDS, RequestMethod


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """One route to compile. ``fields`` keeps declaration order."""

    url: str
    method: str | RequestMethod | None = None
    handler: Handler | None = None
    middlewares: Sequence[Callable[..., Any]] = ()
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "middlewares", tuple(self.middlewares))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteSpec:
        """Build a spec from the dict form, splitting reserved keys off."""
        return cls(
            url=data["url"],
            method=data.get("method"),
            handler=data.get("handler"),
            middlewares=data.get("middlewares") or (),
            fields={k: v for k, v in data.items() if k not in RESERVED_FIELDS},
        )


def route(
    url: str,
    *,
    method: str | RequestMethod | None = None,
    handler: Handler | None = None,
    middlewares: Sequence[Callable[..., Any]] = (),
    **fields: Any,
) -> RouteSpec:
    """Keyword builder for ``RouteSpec``; extra keywords become ``fields``."""
    return RouteSpec(
        url=url,
        method=method,
        handler=handler,
        middlewares=middlewares,
        fields=fields,
    )


def as_route_spec(item: RouteSpec | Mapping[str, Any]) -> RouteSpec:
    if isinstance(item, RouteSpec):
        return item
    return RouteSpec.from_mapping(item)
