"""Retention cleanup of old appointments."""

from datetime import datetime, timedelta

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.clock import ensure_utc
from app.models.appointments import appointments
from app.models.notifications import notifications

logger = structlog.get_logger(__name__)


class CleanupService:
    """Delete appointments older than the retention window."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        retention_days: int = settings.appointment_retention_days,
    ):
        """Initialize service with a session factory."""
        self.session_factory = session_factory
        self.retention = timedelta(days=retention_days)

    async def purge_expired(self, now: datetime) -> int:
        """
        Delete appointments booked before ``now - retention`` with their notifications.

        Returns:
            Number of appointments deleted
        """
        cutoff = ensure_utc(now) - self.retention
        logger.info("cleanup_started", cutoff=cutoff.isoformat())

        async with self.session_factory() as db:
            expired = select(appointments.c.id).where(appointments.c.created_at < cutoff)
            result = await db.execute(expired)
            expired_ids = list(result.scalars())

            if not expired_ids:
                logger.info("cleanup_nothing_to_delete")
                return 0

            await db.execute(
                delete(notifications).where(notifications.c.appointment_id.in_(expired_ids))
            )
            await db.execute(delete(appointments).where(appointments.c.id.in_(expired_ids)))
            await db.commit()

        logger.info("cleanup_completed", deleted=len(expired_ids))
        return len(expired_ids)
