"""SIGENU student information system client."""

from user_portal.boundary.sigenu.client import SigenuClient, get_sigenu_client

__all__ = ["SigenuClient", "get_sigenu_client"]
