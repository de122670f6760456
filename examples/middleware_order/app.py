"""Middleware order — named middlewares switched on per route.

Demonstrates:
- Registering middleware factories by name
- One central order, independent of how each route lists its fields
- A login gate that short-circuits the chain
- Route-local middlewares running after the named ones
- An error handler that turns handler exceptions into JSON

Serve ``app`` with any ASGI server, e.g. ``uvicorn app:app``.
"""

import json
import time

from happyrouter import App, HappyRouter, RouterConfig, route


def on_error(error, ctx):
    ctx.body = {"status": -1, "message": str(error)}


app = App()
router = HappyRouter(RouterConfig(error_handler=on_error))


def need_login(required):
    async def check(ctx, next):
        if required and not ctx.get("authorization"):
            ctx.status = 401
            ctx.body = {"status": 401, "message": "login required"}
            return
        await next()

    return check


def timing(label):
    async def measure(ctx, next):
        start = time.monotonic()
        await next()
        ctx.set("X-Timing", f"{label};dur={(time.monotonic() - start) * 1000:.1f}")

    return measure


def tag(value):
    async def add(ctx, next):
        ctx.state.setdefault("tags", []).append(value)
        await next()

    return add


async def audit(ctx, next):
    ctx.state.setdefault("tags", []).append("audit")
    await next()


# The order is fixed once; routes only say which middlewares they want
router.sort_middlewares(["timing", "need_login", "tag"])
router.register_middlewares({"need_login": need_login, "timing": timing, "tag": tag})


def profile(ctx):
    ctx.body = {"user": ctx.get("authorization"), "tags": ctx.state.get("tags", [])}


def broken(ctx):
    ctx.body = json.loads("")


router.add_routes(
    [
        route(
            "/profile",
            method="GET",
            tag="profile",
            need_login=True,
            timing="profile",
            middlewares=[audit],
            handler=profile,
        ),
        route("/broken", method="GET", handler=broken),
    ]
)

app.use(router.routes()).use(router.allowed_methods())
