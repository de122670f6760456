"""happyrouter — declarative routes with named, centrally ordered middleware.

Routes are plain data. Reusable middlewares are registered once by name
and switched on per route by a field of the same name; one declared order
decides how they run, whatever order a route lists them in.

Basic usage::

    from happyrouter import App, HappyRouter

    app = App()
    router = HappyRouter()

    router.register_middlewares({
        "need_login": lambda required: require_login(required),
    })
    router.add_routes([
        {"url": "/", "method": "GET", "need_login": True, "handler": index},
    ])

    app.use(router.routes()).use(router.allowed_methods())
"""

__version__ = "1.1.0"
__all__ = [
    "App",
    "AppConfig",
    "CompiledRoute",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "HappyRouter",
    "HappyRouterError",
    "MethodNotAllowed",
    "Middleware",
    "MiddlewareFactory",
    "MiddlewareRegistry",
    "Next",
    "NotFound",
    "NotImplementedMethod",
    "RequestMethod",
    "RouteCompiler",
    "RouteSpec",
    "Router",
    "RouterConfig",
    "compose",
    "get_context",
    "route",
    "wrap",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import happyrouter`` fast while providing a clean top-level API.
    """
    if name == "HappyRouter":
        from happyrouter.router import HappyRouter

        return HappyRouter

    if name == "App":
        from happyrouter.app import App

        return App

    if name in ("AppConfig", "RouterConfig"):
        from happyrouter import config as _config

        return getattr(_config, name)

    if name in ("Context", "get_context"):
        from happyrouter import context as _ctx

        return getattr(_ctx, name)

    if name in ("RouteSpec", "route"):
        from happyrouter import spec as _spec

        return getattr(_spec, name)

    if name in ("CompiledRoute", "RouteCompiler"):
        from happyrouter import compiler as _compiler

        return getattr(_compiler, name)

    if name in ("Middleware", "MiddlewareFactory", "MiddlewareRegistry", "Next"):
        from happyrouter import middleware as _mw

        return getattr(_mw, name)

    if name == "Router":
        from happyrouter.routing.router import Router

        return Router

    if name == "RequestMethod":
        from happyrouter.methods import RequestMethod

        return RequestMethod

    if name == "compose":
        from happyrouter.chain import compose

        return compose

    if name == "wrap":
        from happyrouter.boundary import wrap

        return wrap

    if name in (
        "ConfigurationError",
        "HTTPError",
        "HappyRouterError",
        "MethodNotAllowed",
        "NotFound",
        "NotImplementedMethod",
    ):
        from happyrouter import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
