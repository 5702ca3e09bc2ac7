"""
In-memory cache configuration settings.

Dependencies: pydantic, pydantic_settings
System role: TTL cache defaults
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class CacheSettings(BaseSettings):
    """TTL cache defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CACHE_",
        case_sensitive=False,
        extra="ignore",
    )

    default_ttl: int = Field(default=1800, description="Default entry TTL in seconds")
    user_dn_ttl: int = Field(default=3600, description="TTL for cached user DNs in seconds")
    offered_usernames_ttl: int = Field(
        default=1800, description="How long offered username options are remembered per CI"
    )
