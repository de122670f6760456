"""Request logging middleware.

Installed on a router's pre-match stage when ``RouterConfig(logger=True)``.
Emits one line when a request enters and one when it leaves::

    [127.0.0.1] [2024-01-01 00:00:00::001] --> GET - /api/demo?key=value - curl/8.4.0
    [127.0.0.1] [2024-01-01 00:00:00::021] <-- GET - /api/demo?key=value - 200 - 20ms

The exit line is logged at ERROR when the downstream chain raised; the
exception is re-raised afterwards so error handling is unaffected.
"""

import logging
import re
import time
from datetime import datetime

from happyrouter.context import Context
from happyrouter.middleware.protocol import Next

logger = logging.getLogger("happyrouter.request")

_WHITESPACE = re.compile(r"\s+")


def format_timestamp(moment: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS::mmm``."""
    return f"{moment:%Y-%m-%d %H:%M:%S}::{moment.microsecond // 1000:03d}"


async def _request_body(ctx: Context) -> str:
    raw = await ctx.read_body()
    return _WHITESPACE.sub("", raw.decode("utf-8", errors="replace"))


async def request_logger(ctx: Context, next: Next) -> None:
    """Log request start and finish with timing and status."""
    started = time.monotonic()
    parts = [
        f"[{ctx.ip}] [{format_timestamp(datetime.now())}] --> {ctx.method.upper()}",
        ctx.url,
        await _request_body(ctx),
        ctx.get("user-agent"),
    ]
    logger.debug(" - ".join(part for part in parts if part))

    error: Exception | None = None
    try:
        await next()
    except Exception as exc:
        error = exc
        raise
    finally:
        elapsed_ms = int((time.monotonic() - started) * 1000)
        line = " - ".join(
            [
                f"[{ctx.ip}] [{format_timestamp(datetime.now())}] <-- {ctx.method.upper()}",
                ctx.url,
                str(ctx.status),
                f"{elapsed_ms}ms",
            ]
        )
        if error is not None:
            logger.error(line)
        else:
            logger.debug(line)
