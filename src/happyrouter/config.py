"""Router and application configuration.

Frozen dataclasses — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from happyrouter._internal.types import ErrorHandler
from happyrouter.methods import DEFAULT_METHODS


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Per-router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(
            prefix="/api",
            strict=True,
            logger=True,
            methods=("GET", "POST", "OPTIONS"),
            error_handler=lambda error, ctx: setattr(ctx, "body", {"message": str(error)}),
        )
    """

    # Prepended to every route pattern
    prefix: str = ""

    # Take the trailing slash into account when matching
    strict: bool = False

    # Methods the router implements; "ALL" routes answer exactly these
    methods: tuple[str, ...] = DEFAULT_METHODS

    # Receives (error, ctx) for exceptions raised by route handlers
    error_handler: ErrorHandler | None = None

    # Log every request on this router's pre-match stage
    logger: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", tuple(m.upper() for m in self.methods))


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Host application configuration.

    ``debug`` puts the traceback of unhandled errors into the 500 body.
    """

    debug: bool = False
