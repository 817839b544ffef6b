"""Tests for SMTP email delivery."""

from unittest.mock import MagicMock, patch

import pytest

from app.config import settings
from app.services.email_service import EmailService


def smtp_settings(**overrides):
    """Settings with a usable SMTP configuration."""
    values = {
        "email_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_use_tls": True,
        "smtp_sender_email": "queue@example.com",
        "smtp_sender_name": "Pharmacy Queue",
        "smtp_password": "secret",
    }
    values.update(overrides)
    return settings.model_copy(update=values)


def test_build_message():
    """Test the MIME headers and plain-text body."""
    service = EmailService(smtp_settings())

    message = service.build_message("jane@example.com", "Hello", "Body text")

    assert message["From"] == "Pharmacy Queue <queue@example.com>"
    assert message["To"] == "jane@example.com"
    assert message["Subject"] == "Hello"
    assert message.get_content().strip() == "Body text"


@pytest.mark.asyncio
async def test_send_email_over_smtp():
    """Test a configured service logs in over TLS and sends."""
    service = EmailService(smtp_settings())

    with patch("app.services.email_service.smtplib.SMTP") as smtp_class:
        client = smtp_class.return_value.__enter__.return_value
        result = await service.send_email("jane@example.com", "Hello", "Body")

    assert result is True
    smtp_class.assert_called_once_with("smtp.example.com", 587, timeout=settings.smtp_timeout_seconds)
    client.starttls.assert_called_once()
    client.login.assert_called_once_with("queue@example.com", "secret")
    client.send_message.assert_called_once()


@pytest.mark.asyncio
async def test_send_email_without_tls_or_login():
    """Test plain relays without credentials are supported."""
    service = EmailService(smtp_settings(smtp_use_tls=False, smtp_password=""))

    with patch("app.services.email_service.smtplib.SMTP") as smtp_class:
        client = smtp_class.return_value.__enter__.return_value
        result = await service.send_email("jane@example.com", "Hello", "Body")

    assert result is True
    client.starttls.assert_not_called()
    client.login.assert_not_called()


@pytest.mark.asyncio
async def test_send_email_disabled():
    """Test nothing is sent when email is switched off."""
    service = EmailService(smtp_settings(email_enabled=False))

    with patch("app.services.email_service.smtplib.SMTP") as smtp_class:
        result = await service.send_email("jane@example.com", "Hello", "Body")

    assert result is False
    smtp_class.assert_not_called()


@pytest.mark.asyncio
async def test_send_email_not_configured():
    """Test a missing sender address is reported as a failed send."""
    service = EmailService(smtp_settings(smtp_sender_email=""))

    assert service.is_configured is False
    assert await service.send_email("jane@example.com", "Hello", "Body") is False


@pytest.mark.asyncio
async def test_send_email_smtp_error():
    """Test SMTP failures are returned as False instead of raised."""
    service = EmailService(smtp_settings())

    with patch("app.services.email_service.smtplib.SMTP") as smtp_class:
        smtp_class.return_value.__enter__.return_value = MagicMock(
            send_message=MagicMock(side_effect=OSError("connection reset"))
        )
        result = await service.send_email("jane@example.com", "Hello", "Body")

    assert result is False
