"""
Router utility functions.

Contains helpers shared by the router packages to keep endpoints clean.
"""

from user_portal.api.routers.router_utils.error_handling import handle_portal_errors
from user_portal.api.routers.router_utils.request_info import client_ip, user_agent

__all__ = [
    "client_ip",
    "handle_portal_errors",
    "user_agent",
]
