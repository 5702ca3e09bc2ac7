"""
SIGENU API configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Student information system client configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class SigenuSettings(BaseSettings):
    """SIGENU REST API configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SIGENU_",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default="http://localhost:8080/sigenu-rest", description="SIGENU base URL")
    api_user: str = Field(default="", description="Basic auth user")
    api_password: str = Field(default="", description="Basic auth password")
    timeout: float = Field(default=15.0, description="Request timeout in seconds")
    student_cache_ttl: int = Field(default=10800, description="Student record cache TTL in seconds")
    career_cache_ttl: int = Field(default=86400, description="Career catalogue cache TTL in seconds")
