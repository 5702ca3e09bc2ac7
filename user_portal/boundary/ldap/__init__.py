"""
Directory boundary layer: ldap3 connection pool and client.

Exports:
  - DirectoryClient, get_directory_client(): Async directory operations
  - DirectoryEntry: Normalized search result
  - LDAPConnectionPool: Pooled admin connections

Dependencies: ldap3, tenacity, user_portal.configs
System role: Active Directory adapter
"""

from user_portal.boundary.ldap.client import DirectoryClient, get_directory_client
from user_portal.boundary.ldap.entries import DirectoryEntry
from user_portal.boundary.ldap.pool import LDAPConnectionPool

__all__ = [
    "DirectoryClient",
    "DirectoryEntry",
    "LDAPConnectionPool",
    "get_directory_client",
]
