"""Notification service for recording and composing appointment emails."""

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import ensure_utc
from app.models.notifications import notifications
from app.schemas.notifications import NotificationResponse, NotificationType
from app.schemas.queue import QueueStatus

logger = structlog.get_logger(__name__)


class NotificationService:
    """Service for the notification log kept per appointment."""

    @staticmethod
    async def find_notification(
        db: AsyncSession,
        appointment_id: UUID,
        notification_type: NotificationType,
    ) -> dict[str, Any] | None:
        """
        Find a notification of one type for an appointment.

        Args:
            db: Database session
            appointment_id: Appointment ID
            notification_type: Type to look for

        Returns:
            The first matching record, or None
        """
        query = (
            select(notifications)
            .where(
                notifications.c.appointment_id == appointment_id,
                notifications.c.notification_type == notification_type.value,
            )
            .limit(1)
        )
        result = await db.execute(query)
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def insert_notification(
        db: AsyncSession,
        appointment_id: UUID,
        notification_type: NotificationType,
        email_content: str,
        email_sent: bool,
        notification_time: datetime,
    ) -> dict[str, Any]:
        """
        Insert a notification record. The caller owns the commit.

        Returns:
            Created record
        """
        stmt = (
            insert(notifications)
            .values(
                appointment_id=appointment_id,
                notification_type=notification_type.value,
                email_content=email_content,
                email_sent=email_sent,
                notification_time=notification_time,
            )
            .returning(notifications)
        )
        result = await db.execute(stmt)
        return dict(result.mappings().one())

    @staticmethod
    async def mark_sent(db: AsyncSession, notification_id: UUID) -> None:
        """Flag a notification as delivered and commit."""
        await db.execute(
            update(notifications)
            .where(notifications.c.id == notification_id)
            .values(email_sent=True)
        )
        await db.commit()

    @staticmethod
    async def list_for_appointment(
        db: AsyncSession,
        appointment_id: UUID,
    ) -> list[NotificationResponse]:
        """Notification history of an appointment, oldest first."""
        query = (
            select(notifications)
            .where(notifications.c.appointment_id == appointment_id)
            .order_by(notifications.c.notification_time, notifications.c.notification_type)
        )
        result = await db.execute(query)
        return [NotificationResponse.model_validate(dict(row)) for row in result.mappings()]

    @staticmethod
    def build_confirmation_email(appointment: dict[str, Any], timezone: Any) -> tuple[str, str]:
        """
        Compose the booking confirmation email.

        Args:
            appointment: Appointment record
            timezone: Zone used to display the booking time

        Returns:
            Tuple of (subject, body)
        """
        booked_at = ensure_utc(appointment["created_at"]).astimezone(timezone)
        notes = appointment.get("additional_notes")
        notes_line = f"\nNotes: {notes}" if notes else ""

        body = (
            f"Hi {appointment['name']},\n\n"
            "Your appointment has been booked.\n\n"
            f"Queue Number: {appointment['queue_number']}\n\n"
            "Details:\n"
            f"- Purpose: {appointment['purpose']}{notes_line}\n"
            f"- Date: {booked_at:%b %d, %Y}\n"
            f"- Time: {booked_at:%I:%M %p}\n\n"
            "You can check your queue status anytime on our website.\n\n"
            "Thanks,\n"
            "Pharmacy Team"
        )
        return f"Your Queue Number: {appointment['queue_number']}", body

    @staticmethod
    def build_reminder_email(
        appointment: dict[str, Any],
        queue_status: QueueStatus,
        threshold_minutes: int,
    ) -> tuple[str, str]:
        """
        Compose a reminder that the customer's turn is near.

        Args:
            appointment: Appointment record
            queue_status: Live status the reminder is based on
            threshold_minutes: Reminder threshold (10 or 5)

        Returns:
            Tuple of (subject, body)
        """
        urgent = threshold_minutes <= 5
        subject = f"Your appointment is in {threshold_minutes} minutes" + ("!" if urgent else "")
        closing = (
            "Please be ready to be called soon."
            if urgent
            else "Please make sure you're ready when called."
        )

        body = (
            f"Dear {appointment['name']},\n\n"
            f"Your appointment is coming up in about {threshold_minutes} minutes"
            + ("!" if urgent else ".")
            + "\n"
            f"Queue Number: {appointment['queue_number']}\n"
            f"Current Position: {queue_status.position}\n"
            f"Estimated Wait Time: {queue_status.estimated_wait_time} minutes\n\n"
            f"{closing}\n\n"
            "Best regards,\n"
            "Pharmacy Queue System"
        )
        return subject, body
