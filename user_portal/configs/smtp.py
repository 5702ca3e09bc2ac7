"""
SMTP configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Outbound email configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class SMTPSettings(BaseSettings):
    """SMTP relay configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMTP_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="SMTP host")
    port: int = Field(default=587, description="SMTP port")
    user: str = Field(default="", description="SMTP login user")
    password: str = Field(default="", description="SMTP login password")
    sender: str = Field(default="portal@uniss.edu.cu", description="From address")
    sender_name: str = Field(default="Portal de Usuarios UNISS", description="From display name")
    start_tls: bool = Field(default=True, description="Upgrade the connection with STARTTLS")
    daily_limit: int = Field(default=500, description="Maximum messages sent per day")
