"""
Audit log ORM model.

One row per security-relevant action: logins, password changes, PIN and
2FA changes, account creation and removal.

Dependencies: sqlalchemy, user_portal.boundary.db.base
System role: Persistent audit trail
"""

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from user_portal.boundary.db.base import Base, TimestampMixin, UUIDMixin


class AuditLogModel(Base, UUIDMixin, TimestampMixin):
    """
    Audit trail entry.

    Attributes:
        action: Action name in upper snake case (LOGIN, PASSWORD_CHANGE, ...)
        username: sAMAccountName or identifier the action targeted
        success: Whether the action succeeded
        details: Free-form JSON context (error messages, attempt numbers)
        ip: Client address when known
        user_agent: Client User-Agent when known
        device: Short device description derived from the User-Agent
    """

    __tablename__ = "logs"

    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    device: Mapped[str | None] = mapped_column(String(128), nullable=True)
