"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from user_portal.configs.base import BaseSettings
from user_portal.configs.cache import CacheSettings
from user_portal.configs.database import DatabaseSettings
from user_portal.configs.ldap import LDAPSettings
from user_portal.configs.security import SecuritySettings
from user_portal.configs.sigenu import SigenuSettings
from user_portal.configs.smtp import SMTPSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    ldap: LDAPSettings = LDAPSettings()
    security: SecuritySettings = SecuritySettings()
    sigenu: SigenuSettings = SigenuSettings()
    smtp: SMTPSettings = SMTPSettings()
    cache: CacheSettings = CacheSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from user_portal.configs import get_settings
        settings = get_settings()
    """
    return Settings()
