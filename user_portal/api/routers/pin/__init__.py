"""
PIN router package.

Exports the router for recovery PIN endpoints.
"""

from .pin_router import router

__all__ = ["router"]
