"""
Security configuration settings.

JWT signing secrets and lifetimes, the passphrase for secret-at-rest
encryption and the TOTP issuer label.

Dependencies: pydantic, pydantic_settings
System role: Authentication and encryption configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class SecuritySettings(BaseSettings):
    """Token and encryption configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SECURITY_",
        case_sensitive=False,
        extra="ignore",
    )

    jwt_secret: str = Field(default="change-me", description="Access token signing secret")
    jwt_refresh_secret: str = Field(default="change-me-too", description="Refresh token signing secret")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_minutes: int = Field(default=60, description="Access token lifetime in minutes")
    refresh_token_days: int = Field(default=7, description="Refresh token lifetime in days")

    encryption_key: str = Field(default="change-me", description="Passphrase for TOTP secret and PIN encryption")
    totp_issuer: str = Field(default="Sistema UNISS", description="Issuer shown in authenticator apps")
