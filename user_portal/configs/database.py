"""
Database configuration settings.

The relational store holds the audit trail, employee records and the
device registry. POSTGRES_* variables build an asyncpg URL; DATABASE_URL
replaces it entirely (used for SQLite in local runs).

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Audit/HR/device store connection settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="portal")
    password: str = Field(default="portal")
    db: str = Field(default="user_portal", description="Database holding audit_logs, employees and devices")

    pool_size: int = Field(default=5, description="Persistent pooled connections")
    max_overflow: int = Field(default=10, description="Extra connections allowed under load")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False)

    require_ssl: bool = Field(default=False, description="Request TLS from the PostgreSQL server")
    url_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "POSTGRES_URL_OVERRIDE"),
        description="Complete SQLAlchemy async URL",
    )

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for create_async_engine."""
        if self.url_override:
            return self.url_override
        url = f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{url}?ssl=require" if self.require_ssl else url
