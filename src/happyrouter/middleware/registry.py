"""Named middleware factories and their declared execution order.

Both live on one router instance and are filled during setup, before any
route is compiled. Neither operation can fail: names that are never used,
and ordering entries that were never registered, are simply inert.
"""

from collections.abc import Iterable, Iterator, Mapping

from happyrouter.middleware.protocol import MiddlewareFactory


class MiddlewareRegistry:
    """Store of middleware factories keyed by name, plus an ordering.

    Usage::

        registry = MiddlewareRegistry()
        registry.declare_order(["auth", "validate"])
        registry.register({
            "auth": lambda required: require_login if required else passthrough,
            "validate": make_validator,
        })
    """

    __slots__ = ("_factories", "_order")

    def __init__(self) -> None:
        self._factories: dict[str, MiddlewareFactory] = {}
        # dict keys double as an insertion-ordered set
        self._order: dict[str, None] = {}

    def register(self, factories: Mapping[str, MiddlewareFactory]) -> None:
        """Merge factories into the store. Existing names are overwritten."""
        for name, factory in factories.items():
            self._factories[name] = factory

    def declare_order(self, keys: Iterable[str] = ()) -> None:
        """Append names to the execution order.

        A name keeps the position of its first declaration; declaring it
        again, in this call or a later one, changes nothing.
        """
        for key in keys:
            self._order.setdefault(key, None)

    @property
    def order(self) -> tuple[str, ...]:
        """Declared names, in precedence order."""
        return tuple(self._order)

    def get(self, name: str) -> MiddlewareFactory | None:
        return self._factories.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)
