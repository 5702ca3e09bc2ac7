"""SMTP email delivery and message templates."""

from user_portal.boundary.email.mailer import SMTPMailer, get_mailer

__all__ = ["SMTPMailer", "get_mailer"]
