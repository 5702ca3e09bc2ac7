"""
Two-factor router package.

Exports the router for 2FA management endpoints.
"""

from .two_factor_router import router

__all__ = ["router"]
