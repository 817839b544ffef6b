"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.redis_client import CacheManager, get_redis_client
from app.database import get_db
from app.services.email_service import EmailService, MailTransport
from app.services.queue_settings_service import QueueSettingsService


def get_cache_manager() -> CacheManager | None:
    """Cache manager backed by the shared Redis client."""
    return CacheManager(get_redis_client())


def get_mail_transport() -> MailTransport:
    """Mail transport used for confirmation emails."""
    return EmailService()


def get_queue_settings_service(
    cache_manager: Annotated[CacheManager | None, Depends(get_cache_manager)],
) -> QueueSettingsService:
    """Queue settings service sharing the request's cache manager."""
    return QueueSettingsService(cache_manager)


async def verify_admin_secret(
    x_admin_secret: Annotated[str | None, Header(description="Admin secret key")] = None,
) -> None:
    """
    Reject requests that do not carry the admin secret.

    Raises:
        HTTPException: If the header is missing or wrong
    """
    if x_admin_secret != settings.admin_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin secret key",
        )


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
SettingsService = Annotated[QueueSettingsService, Depends(get_queue_settings_service)]
Mailer = Annotated[MailTransport, Depends(get_mail_transport)]
AdminAccess = Depends(verify_admin_secret)
