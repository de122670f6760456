"""happyrouter exception hierarchy.

Shared across the router, the compiler and the host app so every module
raises and catches the same types.
"""

from collections.abc import Iterable
from dataclasses import dataclass


class HappyRouterError(Exception):
    """Base for all happyrouter-specific errors."""


class ConfigurationError(HappyRouterError):
    """Raised when a route declaration or app setup is invalid.

    Typically raised while compiling routes, before any request is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(HappyRouterError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The host app catches
    these and turns them into a response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods in the order
    the router reported them.
    """

    def __init__(self, allowed: Iterable[str], detail: str = "Method Not Allowed") -> None:
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", ", ".join(allowed)),),
        )


class NotImplementedMethod(HTTPError):  # noqa: N818
    """501 — the router does not implement the request method at all."""

    def __init__(self, detail: str = "Not Implemented") -> None:
        super().__init__(status=501, detail=detail)
