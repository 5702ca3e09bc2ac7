"""
Password expiry service.

Computes days until each password expires (90 days after the last change),
reports users close to expiry and mails them alerts at fixed thresholds.

Dependencies: user_portal.boundary.ldap, user_portal.boundary.email
System role: Password expiry notification use cases
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from user_portal.boundary.email import SMTPMailer, templates
from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

MAX_PASSWORD_AGE = timedelta(days=90)
NO_EXPIRY_DATA = 999

ALERT_TYPES = {
    7: "primera-alerta",
    3: "alerta-urgente",
    1: "alerta-final",
    0: "cuenta-suspendida",
}
DEFAULT_THRESHOLDS = tuple(ALERT_TYPES)

EXPIRY_FILTER = (
    f"(&{filters.ACTIVE_USERS}(company=*)(|(pwdLastSet=*)(pwdChangedTime=*)))"
)
EXPIRY_ATTRIBUTES = ["cn", "displayName", "company", "sAMAccountName", "pwdLastSet", "pwdChangedTime"]

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def parse_password_timestamp(value: str) -> datetime | None:
    """
    Parse ``pwdChangedTime`` (YYYYMMDDHHMMSSZ) or AD ``pwdLastSet``
    (100 ns intervals since 1601).
    """
    value = (value or "").strip()
    if not value or value == "0":
        return None
    if value.endswith("Z"):
        try:
            return datetime.strptime(value[:14], "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
        except ValueError:
            return None
    if value.isdigit():
        return _FILETIME_EPOCH + timedelta(microseconds=int(value) // 10)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def days_until_expiry(changed_at: datetime | None, now: datetime | None = None) -> int:
    """Whole days left, rounded up and never negative; 999 without data."""
    if changed_at is None:
        return NO_EXPIRY_DATA
    now = now or datetime.now(timezone.utc)
    remaining = (changed_at + MAX_PASSWORD_AGE - now).total_seconds() / 86400
    return max(0, math.ceil(remaining))


class PasswordExpiryService:
    def __init__(self, directory: DirectoryClient, mailer: SMTPMailer) -> None:
        self.directory = directory
        self.mailer = mailer

    def _describe(self, entry: DirectoryEntry, now: datetime) -> dict[str, Any]:
        changed = parse_password_timestamp(entry.get("pwdChangedTime") or entry.get("pwdLastSet"))
        days_left = days_until_expiry(changed, now)
        return {
            "email": entry.get("company"),
            "userName": entry.get("displayName") or entry.get("cn"),
            "sAMAccountName": entry.get("sAMAccountName"),
            "daysLeft": days_left,
            "alertType": ALERT_TYPES.get(days_left),
        }

    async def _all_users(self) -> list[dict[str, Any]]:
        entries = await self.directory.search(EXPIRY_FILTER, attributes=EXPIRY_ATTRIBUTES, paged=True)
        now = datetime.now(timezone.utc)
        return [
            user
            for user in (self._describe(entry, now) for entry in entries)
            if user["email"] and "@" in user["email"]
        ]

    async def users_expiring(self, thresholds: tuple[int, ...] = DEFAULT_THRESHOLDS) -> list[dict[str, Any]]:
        """Users whose days left are exactly one of *thresholds*."""
        return [u for u in await self._all_users() if u["daysLeft"] in thresholds]

    async def report(self) -> dict[str, Any]:
        """Users expiring within a week, bucketed by urgency."""
        users = [u for u in await self._all_users() if u["daysLeft"] <= 7]
        buckets = {
            "fourToSevenDays": [u for u in users if 4 <= u["daysLeft"] <= 7],
            "twoToThreeDays": [u for u in users if 2 <= u["daysLeft"] <= 3],
            "oneDay": [u for u in users if u["daysLeft"] == 1],
            "expired": [u for u in users if u["daysLeft"] == 0],
        }
        if users:
            summary = (
                f"{len(users)} usuario(s) con contraseñas próximas a expirar: "
                f"{len(buckets['fourToSevenDays'])} en 4-7 días, "
                f"{len(buckets['twoToThreeDays'])} en 2-3 días, "
                f"{len(buckets['oneDay'])} en 1 día y "
                f"{len(buckets['expired'])} expiradas."
            )
        else:
            summary = "No hay usuarios con contraseñas próximas a expirar."
        return {"total": len(users), **buckets, "summary": summary}

    async def send_alerts(self, thresholds: tuple[int, ...] = DEFAULT_THRESHOLDS) -> dict[str, Any]:
        """Mail every user at a threshold; stops early when the quota runs out."""
        users = await self.users_expiring(thresholds)
        sent: list[str] = []
        failed: list[dict[str, Any]] = []
        for user in users:
            subject, html, text = templates.password_expiry_alert(user["userName"], user["daysLeft"])
            try:
                await self.mailer.send(user["email"], subject, html, text)
                sent.append(user["sAMAccountName"])
            except UpstreamServiceError as e:
                failed.append({"sAMAccountName": user["sAMAccountName"], "error": e.message})
                if e.unavailable:
                    break

        logger.info(
            "Password expiry alerts processed",
            extra={"candidates": len(users), "sent": len(sent), "failed": len(failed)},
        )
        return {
            "candidates": len(users),
            "sent": len(sent),
            "failed": failed,
            "emailStats": self.mailer.stats(),
        }
