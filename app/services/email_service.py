"""SMTP email delivery for confirmations and reminders."""

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

import structlog

from app.config import Settings, settings

logger = structlog.get_logger(__name__)


class MailTransport(Protocol):
    """Anything that can deliver a plain-text email."""

    async def send_email(self, to: str, subject: str, body: str) -> bool:
        """Deliver one message, returning whether it was accepted."""
        ...


class EmailService:
    """Send plain-text emails over SMTP."""

    def __init__(self, config: Settings = settings):
        """Initialize service with SMTP configuration."""
        self.config = config

    @property
    def is_configured(self) -> bool:
        """Whether a sender address and host are available."""
        return bool(self.config.smtp_sender_email and self.config.smtp_host)

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        """Build the MIME message for a plain-text email."""
        message = EmailMessage()
        message["From"] = formataddr((self.config.smtp_sender_name, self.config.smtp_sender_email))
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send_email(self, to: str, subject: str, body: str) -> bool:
        """
        Send an email.

        Delivery problems are logged and reported through the return value,
        never raised.

        Args:
            to: Recipient address
            subject: Message subject
            body: Plain-text body

        Returns:
            True if the SMTP server accepted the message
        """
        if not self.config.email_enabled:
            logger.info("email_disabled", to=to, subject=subject)
            return False

        if not self.is_configured:
            logger.error("email_not_configured", to=to)
            return False

        message = self.build_message(to, subject, body)

        try:
            logger.info("email_sending", to=to, subject=subject)
            await asyncio.to_thread(self._deliver, message)
        except Exception as e:
            logger.error("email_send_failed", to=to, subject=subject, error=str(e))
            return False

        logger.info("email_sent", to=to, subject=subject)
        return True

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(
            self.config.smtp_host,
            self.config.smtp_port,
            timeout=self.config.smtp_timeout_seconds,
        ) as client:
            if self.config.smtp_use_tls:
                client.starttls()
            if self.config.smtp_password:
                client.login(self.config.smtp_sender_email, self.config.smtp_password)
            client.send_message(message)
