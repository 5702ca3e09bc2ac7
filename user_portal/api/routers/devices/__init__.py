"""
Devices router package.

Exports the router for device registration endpoints.
"""

from .devices_router import router

__all__ = ["router"]
