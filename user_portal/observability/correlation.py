"""
Correlation ID propagation.

Each request carries one ID through every log line it produces. A
caller-supplied ID is reused only when it looks like an opaque token,
so header values can never inject text into the log stream.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import re
import uuid
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"

_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(candidate: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Args:
        candidate: Incoming header value; replaced by a fresh UUID when
            missing or malformed

    Returns:
        str: The ID now in effect
    """
    value = candidate if candidate and _VALID_ID.match(candidate) else uuid.uuid4().hex
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
