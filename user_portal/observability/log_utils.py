"""
Credential-safe structured logging.

Audit and directory code logs request context through these helpers so
passwords, PINs, TOTP secrets and tokens are masked before they reach a
handler.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "newpassword",
        "new_password",
        "currentpassword",
        "current_password",
        "confirmpassword",
        "pin",
        "secret",
        "code",
        "token",
        "accesstoken",
        "refreshtoken",
        "access_token",
        "refresh_token",
    }
)

REDACTED = "***"


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record.

    Collections are summarised by size rather than dumped; long strings
    are cut at max_length.
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        rendered = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        rendered = f"dict({len(value)} keys)"
    else:
        rendered = str(value)

    if len(rendered) > max_length:
        return rendered[:max_length] + f"... (truncated, {len(rendered)} total)"
    return rendered


def redact(context: dict[str, Any]) -> dict[str, str]:
    """Stringify a context dict, masking credential keys."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_KEYS else safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    logger.log(level, message, extra=redact(context))
