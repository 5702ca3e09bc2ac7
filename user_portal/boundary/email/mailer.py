"""
SMTP mailer.

Sends multipart (plain text + HTML) messages through the configured relay
and enforces a per-day sending quota.

Dependencies: aiosmtplib, user_portal.configs
System role: Outbound email adapter
"""

import logging
import threading
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from functools import lru_cache

import aiosmtplib

from user_portal.configs import get_settings
from user_portal.configs.smtp import SMTPSettings
from user_portal.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "SMTP"


class DailyCounter:
    """Messages sent today; resets when the date changes."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._day = date.today()
        self._count = 0
        self._lock = threading.Lock()

    def _roll(self) -> None:
        today = date.today()
        if today != self._day:
            self._day = today
            self._count = 0

    def try_increment(self) -> bool:
        with self._lock:
            self._roll()
            if self._count >= self.limit:
                return False
            self._count += 1
            return True

    def rollback(self) -> None:
        with self._lock:
            self._count = max(0, self._count - 1)

    @property
    def count(self) -> int:
        with self._lock:
            self._roll()
            return self._count

    def reset(self) -> None:
        with self._lock:
            self._count = 0


class SMTPMailer:
    """Async SMTP sender with a daily quota."""

    def __init__(self, settings: SMTPSettings) -> None:
        self._settings = settings
        self.counter = DailyCounter(settings.daily_limit)

    async def send(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> None:
        """
        Send one message.

        Raises:
            UpstreamServiceError: Quota exhausted (503) or relay failure (502)
        """
        if not self.counter.try_increment():
            logger.warning("Daily email limit reached", extra={"limit": self.counter.limit})
            raise UpstreamServiceError(
                "Límite diario de correos alcanzado",
                service=SERVICE_NAME,
                unavailable=True,
                details=self.stats(),
            )

        message = MIMEMultipart("alternative")
        message["From"] = formataddr((self._settings.sender_name, self._settings.sender))
        message["To"] = to_email
        message["Subject"] = subject
        if text_content:
            message.attach(MIMEText(text_content, "plain", "utf-8"))
        message.attach(MIMEText(html_content, "html", "utf-8"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.user or None,
                password=self._settings.password or None,
                start_tls=self._settings.start_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.counter.rollback()
            logger.error(
                "Failed to send email",
                extra={"to": to_email, "subject": subject, "error": str(e)},
            )
            raise UpstreamServiceError(
                f"No se pudo enviar el correo: {e}", service=SERVICE_NAME
            ) from e

        logger.info("Email sent", extra={"to": to_email, "subject": subject})

    def stats(self) -> dict:
        count = self.counter.count
        remaining = max(0, self.counter.limit - count)
        return {
            "count": count,
            "remaining": remaining,
            "daily_limit": self.counter.limit,
            "usage_message": (
                f"Correos enviados: {count} | Restantes hoy: {remaining} "
                f"| Límite: {self.counter.limit}"
            ),
        }


@lru_cache
def get_mailer() -> SMTPMailer:
    return SMTPMailer(get_settings().smtp)
