"""
Outbound email notifications.

Sending is best-effort: every public method returns True when the message
was handed to the SMTP server and False otherwise. Nothing here raises.
"""

import asyncio
import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from typing import Optional

from recruitment.core.config import settings

logger = logging.getLogger(__name__)


class NotificationService:
    """SMTP-backed notifier for candidate-facing emails."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        use_tls: Optional[bool] = None,
    ):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.sender = sender if sender is not None else settings.SMTP_FROM
        self.use_tls = use_tls if use_tls is not None else settings.SMTP_USE_TLS

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.port)

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(message)

    async def _send(self, to_email: str, subject: str, body: str) -> bool:
        if not self.is_configured:
            logger.warning("SMTP not configured; email '%s' to %s not sent", subject, to_email)
            return False

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = to_email
        message.set_content(body)

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("Failed sending email '%s' to %s: %s", subject, to_email, exc)
            return False

        logger.info("Email '%s' sent to %s", subject, to_email)
        return True

    async def send_account_created(self, email: str, first_name: str, temporary_password: str) -> bool:
        body = (
            f"Hello {first_name},\n\n"
            "An account has been created for you on the recruitment platform.\n\n"
            f"Email: {email}\n"
            f"Temporary password: {temporary_password}\n\n"
            f"Sign in at {settings.FRONTEND_URL}/login and change your password.\n"
        )
        return await self._send(email, "Your recruitment account", body)

    async def send_test_assignment_notice(
        self,
        email: str,
        first_name: str,
        exam_date: Optional[datetime] = None,
    ) -> bool:
        when = exam_date.strftime("%Y-%m-%d %H:%M UTC") if exam_date else "a date to be confirmed"
        body = (
            f"Hello {first_name},\n\n"
            f"Your evaluation tests have been scheduled for {when}.\n"
            f"Details are available at {settings.FRONTEND_URL}.\n"
        )
        return await self._send(email, "Your evaluation tests", body)


def get_notifier() -> NotificationService:
    """FastAPI dependency."""
    return NotificationService()
