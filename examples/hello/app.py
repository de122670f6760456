"""Hello — the smallest happyrouter app.

Demonstrates:
- Routes declared as plain dicts under a prefix
- Path parameters
- Text, HTML and JSON bodies
- OPTIONS / 405 answers from ``allowed_methods()``

Serve ``app`` with any ASGI server, e.g. ``uvicorn app:app``.
"""

from happyrouter import App, HappyRouter, RouterConfig

app = App()
router = HappyRouter(RouterConfig(prefix="/hello"))


def index(ctx):
    ctx.body = "Hello, World!"


def greet(ctx):
    ctx.body = f"Hello, {ctx.params['name']}!"


def page(ctx):
    ctx.body = "<h1>Hello, World!</h1>"


def status(ctx):
    ctx.body = {"status": "ok"}


router.add_routes(
    [
        {"url": "/", "method": "GET", "handler": index},
        {"url": "/page", "method": "GET", "handler": page},
        {"url": "/status", "method": "GET", "handler": status},
        {"url": "/{name}", "method": "GET", "handler": greet},
    ]
)

app.use(router.routes()).use(router.allowed_methods())
