"""
Base configuration settings.

Shared pydantic-settings behaviour (.env loading, case-insensitive
variables) plus the HTTP server options of the portal itself.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Common loader options and portal server settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=3001, description="HTTP port of the portal API")
    api_prefix: str = Field(default="/api", description="Path prefix for every route")
    log_level: str = Field(default="INFO", description="Root logging level")
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Portal frontend origin allowed by CORS; empty allows any origin",
    )
