"""
LDAP / Active Directory configuration settings.

Connection parameters, administrative credentials and the directory
locations used for account provisioning.

Dependencies: pydantic, pydantic_settings
System role: Directory connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from user_portal.configs.base import BaseSettings


class LDAPSettings(BaseSettings):
    """Active Directory connection and layout configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LDAP_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(default="ldaps://localhost:636", description="Directory server URL")
    base_dn: str = Field(default="DC=uniss,DC=edu,DC=cu", description="Search base DN")
    admin_dn: str = Field(default="", description="Administrative bind DN")
    admin_password: str = Field(default="", description="Administrative bind password")
    domain: str = Field(default="uniss.edu.cu", description="UPN suffix for user binds")

    students_ou: str = Field(default="OU=SIGENU", description="Parent OU for student accounts, relative to base_dn")
    employees_ou: str = Field(default="OU=Trabajadores", description="Parent OU for employee accounts, relative to base_dn")
    student_groups: list[str] = Field(
        default_factory=lambda: ["CN=correo_nac,OU=_Grupos"],
        description="Groups every new student joins, relative to base_dn",
    )
    employee_groups: list[str] = Field(
        default_factory=lambda: ["CN=correo_int,OU=_Grupos"],
        description="Groups every new employee joins, relative to base_dn",
    )

    pool_size: int = Field(default=5, description="Maximum pooled admin connections")
    connect_timeout: int = Field(default=10, description="Connect timeout in seconds")
    receive_timeout: int = Field(default=15, description="Operation timeout in seconds")
    retry_attempts: int = Field(default=2, description="Extra attempts on transient errors")
    retry_delay: float = Field(default=1.0, description="Backoff unit in seconds, multiplied by the attempt")

    def absolute(self, relative_dn: str) -> str:
        """Append base_dn to a DN fragment."""
        return f"{relative_dn},{self.base_dn}" if relative_dn else self.base_dn
