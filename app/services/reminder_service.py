"""Threshold reminders for customers whose turn is approaching."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import ensure_utc
from app.schemas.notifications import NotificationType
from app.schemas.queue import QueueStatus
from app.services.appointment_service import AppointmentService
from app.services.email_service import MailTransport
from app.services.notification_service import NotificationService
from app.services.queue_service import QueueService
from app.services.queue_settings_service import QueueSettingsService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReminderThreshold:
    """A one-time reminder fired once the estimate drops to ``minutes``."""

    minutes: int
    notification_type: NotificationType


REMINDER_THRESHOLDS: tuple[ReminderThreshold, ...] = (
    ReminderThreshold(10, NotificationType.TEN_MINUTE_REMINDER),
    ReminderThreshold(5, NotificationType.FIVE_MINUTE_REMINDER),
)


@dataclass
class TickResult:
    """What one reminder pass did."""

    appointments_checked: int = 0
    reminders_sent: int = 0
    delivery_failures: int = 0


class ReminderService:
    """
    Send each waiting customer a reminder the first time their estimated
    wait drops to or below each threshold.

    Thresholds are checked independently, so a customer who is already
    within five minutes on their first check gets both reminders at once.
    A reminder type that has been recorded for an appointment is never sent
    again, even if the estimate later rises above the threshold.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        mail_transport: MailTransport,
        settings_service: QueueSettingsService | None = None,
        thresholds: tuple[ReminderThreshold, ...] = REMINDER_THRESHOLDS,
    ):
        """Initialize service with a session factory and mail transport."""
        self.session_factory = session_factory
        self.mail_transport = mail_transport
        self.settings_service = settings_service or QueueSettingsService()
        self.thresholds = thresholds

    async def tick(self, now: datetime) -> TickResult:
        """
        Run one reminder pass over every waiting appointment.

        Each reminder is committed as soon as it is recorded, so no write
        transaction stays open while the next email is sent. Database errors
        propagate and abandon the rest of the pass.

        Args:
            now: Time used for every wait estimate in this pass

        Returns:
            Counters for the pass
        """
        result = TickResult()

        async with self.session_factory() as db:
            waiting = await AppointmentService(db, self.settings_service).list_waiting()
            queue_service = QueueService(db, self.settings_service)

            for appointment in waiting:
                queue_status = await queue_service.get_queue_status(
                    appointment["queue_number"], now
                )
                result.appointments_checked += 1
                await self._remind(db, appointment, queue_status, now, result)

        logger.info(
            "reminder_tick_completed",
            appointments_checked=result.appointments_checked,
            reminders_sent=result.reminders_sent,
            delivery_failures=result.delivery_failures,
        )
        return result

    async def _remind(
        self,
        db: AsyncSession,
        appointment: dict[str, Any],
        queue_status: QueueStatus,
        now: datetime,
        result: TickResult,
    ) -> None:
        for threshold in self.thresholds:
            if queue_status.estimated_wait_time > threshold.minutes:
                continue

            existing = await NotificationService.find_notification(
                db, appointment["id"], threshold.notification_type
            )
            if existing is not None:
                continue

            subject, body = NotificationService.build_reminder_email(
                appointment, queue_status, threshold.minutes
            )
            if not await self._deliver(appointment, subject, body):
                result.delivery_failures += 1

            await NotificationService.insert_notification(
                db,
                appointment_id=appointment["id"],
                notification_type=threshold.notification_type,
                email_content=body,
                email_sent=True,
                notification_time=ensure_utc(now),
            )
            # Release the write lock before the next send
            await db.commit()
            result.reminders_sent += 1
            logger.info(
                "reminder_sent",
                queue_number=appointment["queue_number"],
                reminder_type=threshold.notification_type.value,
                estimated_wait_time=queue_status.estimated_wait_time,
            )

    async def _deliver(self, appointment: dict[str, Any], subject: str, body: str) -> bool:
        try:
            return await self.mail_transport.send_email(appointment["email"], subject, body)
        except Exception as e:
            logger.warning(
                "reminder_delivery_failed",
                queue_number=appointment["queue_number"],
                error=str(e),
            )
            return False
