"""Tests for happyrouter.compiler — middleware selection, ordering, chains."""

import pytest

from happyrouter.compiler import CompiledRoute, RouteCompiler
from happyrouter.errors import ConfigurationError
from happyrouter.methods import RequestMethod
from happyrouter.middleware.registry import MiddlewareRegistry
from happyrouter.routing.router import Router
from happyrouter.spec import RouteSpec, route


def _recording_factory(name: str):
    """Factory whose middleware records (name, option) on ctx.state['trace']."""

    def factory(option):
        async def mw(ctx, next):
            ctx.state.setdefault("trace", []).append((name, option))
            await next()

        mw.name = name  # type: ignore[attr-defined]
        mw.option = option  # type: ignore[attr-defined]
        return mw

    return factory


def _registry(*names: str) -> MiddlewareRegistry:
    registry = MiddlewareRegistry()
    registry.register({name: _recording_factory(name) for name in names})
    return registry


def _handler(ctx):
    ctx.body = "ok"


class TestResolveKeys:
    def test_field_order_without_declared_order(self) -> None:
        compiler = RouteCompiler(_registry("a", "b", "c"))
        spec = route("/x", b=2, c=3, a=1)
        assert compiler.resolve_keys(spec) == ["b", "c", "a"]

    def test_declared_order_wins_over_field_order(self) -> None:
        registry = _registry("a", "b", "c")
        registry.declare_order(["c", "a", "b"])
        compiler = RouteCompiler(registry)

        spec = route("/x", a=1, b=2, c=3)
        assert compiler.resolve_keys(spec) == ["c", "a", "b"]

    def test_declared_but_unused_keys_dropped(self) -> None:
        registry = _registry("a", "b", "c")
        registry.declare_order(["c", "a", "b"])
        compiler = RouteCompiler(registry)

        spec = route("/x", a=1, b=2)
        assert compiler.resolve_keys(spec) == ["a", "b"]

    def test_used_but_undeclared_keys_dropped_once_order_exists(self) -> None:
        registry = _registry("a", "b", "c")
        registry.declare_order(["a"])
        compiler = RouteCompiler(registry)

        spec = route("/x", c=3, a=1, b=2)
        assert compiler.resolve_keys(spec) == ["a"]

    def test_unregistered_fields_ignored(self) -> None:
        compiler = RouteCompiler(_registry("a"))
        spec = route("/x", title="Users", a=1, cache_seconds=30)
        assert compiler.resolve_keys(spec) == ["a"]

    def test_declared_order_of_unregistered_names_is_inert(self) -> None:
        registry = _registry("a")
        registry.declare_order(["ghost", "a"])
        compiler = RouteCompiler(registry)
        assert compiler.resolve_keys(route("/x", a=True, ghost=True)) == ["a"]

    @pytest.mark.parametrize("reserved", ["url", "method", "middlewares", "handler"])
    def test_reserved_names_never_selected(self, reserved: str) -> None:
        registry = _registry(reserved, "a")
        compiler = RouteCompiler(registry)
        spec = RouteSpec("/x", fields={reserved: "value", "a": 1})
        assert compiler.resolve_keys(spec) == ["a"]

    def test_reserved_names_from_mapping_never_selected(self) -> None:
        registry = _registry("handler", "url")
        compiler = RouteCompiler(registry)
        spec = RouteSpec.from_mapping({"url": "/x", "handler": _handler})
        assert compiler.resolve_keys(spec) == []

    def test_no_candidates(self) -> None:
        compiler = RouteCompiler(MiddlewareRegistry())
        assert compiler.resolve_keys(route("/x", anything=1)) == []


class TestBuildChain:
    def test_factories_called_with_route_values(self) -> None:
        registry = _registry("need_login")
        compiler = RouteCompiler(registry)

        chain = compiler.build_chain(route("/x", need_login=True, handler=_handler))

        assert len(chain) == 2
        assert chain[0].name == "need_login"
        assert chain[0].option is True

    def test_route_local_middlewares_follow_registry_ones(self) -> None:
        registry = _registry("a", "b")
        registry.declare_order(["b", "a"])
        compiler = RouteCompiler(registry)

        async def local_one(ctx, next):
            await next()

        async def local_two(ctx, next):
            await next()

        spec = route("/x", a=1, b=2, middlewares=[local_one, local_two], handler=_handler)
        chain = compiler.build_chain(spec)

        assert [getattr(step, "name", None) for step in chain[:2]] == ["b", "a"]
        assert chain[2] is local_one
        assert chain[3] is local_two
        assert len(chain) == 5

    def test_local_middlewares_not_filtered_by_order(self) -> None:
        registry = _registry("a")
        registry.declare_order(["a"])
        compiler = RouteCompiler(registry)

        async def local(ctx, next):
            await next()

        chain = compiler.build_chain(route("/x", middlewares=[local]))
        assert chain == (local,)

    def test_no_handler_no_terminal_step(self) -> None:
        compiler = RouteCompiler(_registry("a"))
        chain = compiler.build_chain(route("/x", a=1))
        assert len(chain) == 1

    def test_empty_route_compiles_to_empty_chain(self) -> None:
        compiler = RouteCompiler(MiddlewareRegistry())
        assert compiler.build_chain(route("/x")) == ()

    def test_factory_called_per_route(self) -> None:
        calls: list[object] = []

        def factory(option):
            calls.append(option)

            async def mw(ctx, next):
                await next()

            return mw

        registry = MiddlewareRegistry()
        registry.register({"auth": factory})
        compiler = RouteCompiler(registry)

        compiler.build_chain(route("/a", auth="admin"))
        compiler.build_chain(route("/b", auth="user"))
        assert calls == ["admin", "user"]


class TestCompile:
    def test_registers_with_router(self) -> None:
        router = Router()
        compiler = RouteCompiler(MiddlewareRegistry())

        compiled = compiler.compile([route("/users", method="GET", handler=_handler)], router)

        assert len(router.layers) == 1
        assert router.layers[0].path == "/users"
        assert router.layers[0].methods == ("HEAD", "GET")
        assert compiled == [
            CompiledRoute(method=RequestMethod.GET, url="/users", chain=router.layers[0].stack)
        ]

    def test_default_method_is_all(self) -> None:
        router = Router(methods=("GET", "POST"))
        compiled = RouteCompiler(MiddlewareRegistry()).compile([route("/x")], router)

        assert compiled[0].method is RequestMethod.ALL
        assert router.layers[0].methods == ("HEAD", "GET", "POST")

    def test_accepts_mappings(self) -> None:
        router = Router()
        compiler = RouteCompiler(_registry("auth"))

        compiled = compiler.compile(
            [{"url": "/x", "method": "post", "auth": True, "handler": _handler}],
            router,
        )

        assert compiled[0].method is RequestMethod.POST
        assert len(compiled[0].chain) == 2

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown route method"):
            RouteCompiler(MiddlewareRegistry()).compile([route("/x", method="BREW")], Router())

    def test_chain_is_immutable_tuple(self) -> None:
        compiled = RouteCompiler(MiddlewareRegistry()).compile(
            [route("/x", handler=_handler)], Router()
        )
        assert isinstance(compiled[0].chain, tuple)

    def test_later_registrations_do_not_reach_compiled_routes(self) -> None:
        registry = MiddlewareRegistry()
        compiler = RouteCompiler(registry)
        router = Router()

        compiled = compiler.compile([route("/x", auth=True, handler=_handler)], router)
        registry.register({"auth": _recording_factory("auth")})

        assert len(compiled[0].chain) == 1
        assert len(router.layers[0].stack) == 1

    def test_same_routes_compile_identically(self) -> None:
        def build() -> list[CompiledRoute]:
            registry = _registry("a", "b", "c")
            registry.declare_order(["c", "a", "b"])
            return RouteCompiler(registry).compile(
                [route("/x", b=2, a=1, handler=_handler), route("/y", c=3)],
                Router(),
            )

        first, second = build(), build()
        for one, two in zip(first, second, strict=True):
            assert one.method == two.method
            assert one.url == two.url
            assert [getattr(s, "name", None) for s in one.chain] == [
                getattr(s, "name", None) for s in two.chain
            ]
            assert [getattr(s, "option", None) for s in one.chain] == [
                getattr(s, "option", None) for s in two.chain
            ]
