"""
Accounts router package.

Exports the router for account creation and self-service profile endpoints.
"""

from .accounts_router import router

__all__ = ["router"]
