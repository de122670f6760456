"""Per-request context — the object every middleware and handler shares.

A ``Context`` pairs the incoming starlette ``Request`` (read side) with the
response under construction (write side). Middlewares and the handler
mutate it in chain order; the host app renders it once the chain settles.

The current context is also published through a ``ContextVar`` so helpers
deep in a call stack can reach it without threading it through::

    from happyrouter.context import get_context

    ctx = get_context()

``ContextVar`` is task-local under asyncio, so concurrent requests never
see each other's context.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, NoReturn

from starlette.datastructures import Headers, QueryParams
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from happyrouter._internal.asgi import Receive, Scope
from happyrouter.errors import HTTPError

if TYPE_CHECKING:
    from happyrouter.routing.layer import Layer


class Context:
    """Mutable request/response state for one request.

    ``status`` starts at 404. Assigning ``body`` without having set a
    status explicitly switches it to 200 (or 204 for ``None``), so a
    handler only needs ``ctx.body = ...`` in the common case.
    """

    __slots__ = (
        "_body",
        "_explicit_status",
        "_status",
        "matched",
        "params",
        "request",
        "response_headers",
        "route_path",
        "state",
    )

    def __init__(self, request: Request) -> None:
        self.request = request
        self.params: dict[str, Any] = {}
        self.route_path: str | None = None
        self.matched: list[Layer] = []
        self.state: dict[str, Any] = {}
        self.response_headers: dict[str, str] = {}
        self._status = 404
        self._explicit_status = False
        self._body: Any = None

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Context:
        """Build a context from a raw ASGI HTTP scope."""
        return cls(Request(scope, receive))

    # -- Request side --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.scope["path"]

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        query_string = self.request.scope.get("query_string", b"").decode("latin-1")
        if query_string:
            return f"{self.path}?{query_string}"
        return self.path

    @property
    def query(self) -> QueryParams:
        return self.request.query_params

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def ip(self) -> str:
        client = self.request.client
        return client.host if client else ""

    def get(self, name: str) -> str:
        """Return a request header, or ``""`` when absent."""
        return self.request.headers.get(name, "")

    async def read_body(self) -> bytes:
        """Read the full request body. Cached, so safe to call repeatedly."""
        return await self.request.body()

    # -- Response side --

    @property
    def status(self) -> int:
        return self._status

    @status.setter
    def status(self, value: int) -> None:
        self._status = value
        self._explicit_status = True

    @property
    def body(self) -> Any:
        return self._body

    @body.setter
    def body(self, value: Any) -> None:
        self._body = value
        if not self._explicit_status:
            self._status = 204 if value is None else 200

    def set(self, name: str, value: str) -> None:
        """Set a response header."""
        self.response_headers[name.lower()] = str(value)

    def throw(self, status: int, detail: str = "") -> NoReturn:
        """Abort the request with an ``HTTPError``."""
        raise HTTPError(status=status, detail=detail)

    def to_response(self) -> Response:
        """Render the context into a starlette response.

        ``str`` bodies are sent as text (HTML when they look like markup),
        ``bytes`` as-is, ``dict`` and ``list`` as JSON.
        """
        body = self._body
        status = self._status
        headers = dict(self.response_headers)

        if body is None:
            if status == 404:
                return PlainTextResponse("Not Found", status_code=404, headers=headers)
            return Response(b"", status_code=status, headers=headers)

        if isinstance(body, dict | list):
            return JSONResponse(body, status_code=status, headers=headers)

        if isinstance(body, bytes):
            return Response(
                body,
                status_code=status,
                headers=headers,
                media_type="application/octet-stream",
            )

        text = str(body)
        media_type = "text/html" if text.lstrip().startswith("<") else "text/plain"
        return Response(text, status_code=status, headers=headers, media_type=media_type)

    def __repr__(self) -> str:
        return f"<Context {self.method} {self.url} status={self._status}>"


# -- Current context --

context_var: ContextVar[Context] = ContextVar("happyrouter_context")
"""The context of the request being served. Set by the host app."""


def get_context() -> Context:
    """Return the current request's context.

    Raises ``LookupError`` if called outside a request.
    """
    return context_var.get()
