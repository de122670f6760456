"""HTTP method names and the reserved route fields.

Route declarations name their method with a ``RequestMethod`` member or its
string value. ``ALL`` registers the route for every method the router
implements.
"""

from enum import StrEnum

from happyrouter.errors import ConfigurationError


class RequestMethod(StrEnum):
    """Methods accepted in a route declaration."""

    ALL = "ALL"
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


INITIAL_METHOD = RequestMethod.ALL
"""Method used when a route does not declare one."""

RESERVED_FIELDS: frozenset[str] = frozenset({"url", "method", "middlewares", "handler"})
"""Route fields that are never read as middleware arguments."""

DEFAULT_METHODS: tuple[str, ...] = ("HEAD", "OPTIONS", "GET", "PUT", "PATCH", "POST", "DELETE")
"""Methods a router implements unless configured otherwise."""


def resolve_method(name: str | RequestMethod | None) -> RequestMethod:
    """Look up a route method by name, case-insensitively.

    ``None`` resolves to ``INITIAL_METHOD``.
    Raises ``ConfigurationError`` for names outside ``RequestMethod``.
    """
    if name is None:
        return INITIAL_METHOD
    try:
        return RequestMethod(str(name).upper())
    except ValueError:
        allowed = ", ".join(m.value for m in RequestMethod)
        msg = f"Unknown route method {name!r}. Expected one of: {allowed}."
        raise ConfigurationError(msg) from None
