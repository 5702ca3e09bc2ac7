"""
Request metadata helpers for the audit trail.

Dependencies: fastapi
System role: Client address and agent extraction
"""

from fastapi import Request


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def user_agent(request: Request) -> str | None:
    return request.headers.get("User-Agent")
