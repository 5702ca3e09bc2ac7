"""
Boundary layer for external system integrations.

Handles all interactions with external systems (Active Directory, the
relational database, SIGENU, SMTP and MAC vendor lookups).
Provides adapters and clients for infrastructure dependencies.
"""
