"""Appointment service for business logic."""

from datetime import datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import ensure_utc, queue_date
from app.core.exceptions import (
    BadRequestException,
    BookingLimitReachedException,
    NotFoundException,
)
from app.models.appointments import appointments
from app.schemas.appointments import (
    CANCELLABLE_STATUSES,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    BookingResponse,
)
from app.schemas.notifications import NotificationType
from app.services.email_service import MailTransport
from app.services.notification_service import NotificationService
from app.services.queue_service import (
    QueueService,
    format_queue_number,
    queue_day_prefix,
)
from app.services.queue_settings_service import QueueSettingsService

logger = structlog.get_logger(__name__)


class AppointmentService:
    """Service for booking and managing appointments."""

    def __init__(
        self,
        db: AsyncSession,
        settings_service: QueueSettingsService | None = None,
        mail_transport: MailTransport | None = None,
    ):
        """Initialize service with database session and collaborators."""
        self.db = db
        self.settings_service = settings_service or QueueSettingsService()
        self.mail_transport = mail_transport

    async def count_booked_on(self, date_segment: str) -> int:
        """Number of queue numbers already issued for a day."""
        stmt = (
            select(func.count())
            .select_from(appointments)
            .where(appointments.c.queue_number.startswith(queue_day_prefix(date_segment)))
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def create_appointment(
        self,
        data: AppointmentCreate,
        now: datetime,
    ) -> BookingResponse:
        """
        Book an appointment and issue the next queue number for today.

        Args:
            data: Booking form data
            now: Booking time

        Returns:
            Created appointment with its live queue position

        Raises:
            BookingLimitReachedException: If today's bookings are at the cap
        """
        booking_date = queue_date(now)
        date_segment = f"{booking_date:%Y%m%d}"

        booked_today = await self.count_booked_on(date_segment)
        max_daily_bookings = await self.settings_service.get_max_daily_bookings(self.db)
        if max_daily_bookings is not None and booked_today >= max_daily_bookings:
            logger.info(
                "booking_limit_reached",
                booking_date=date_segment,
                max_daily_bookings=max_daily_bookings,
            )
            raise BookingLimitReachedException()

        values = {
            "name": data.name,
            "email": str(data.email),
            "phone": data.phone,
            "purpose": data.stored_purpose,
            "additional_notes": data.additional_notes,
            "queue_number": format_queue_number(booking_date, booked_today + 1),
            "status": AppointmentStatus.WAITING.value,
            "created_at": ensure_utc(now),
            "updated_at": ensure_utc(now),
        }

        stmt = insert(appointments).values(**values).returning(appointments)
        result = await self.db.execute(stmt)
        row = dict(result.mappings().one())
        await self.db.commit()

        logger.info("appointment_booked", queue_number=row["queue_number"])

        await self._send_confirmation(row, now)

        queue_status = await QueueService(self.db, self.settings_service).get_queue_status(
            row["queue_number"], now
        )
        return BookingResponse(
            appointment=AppointmentResponse.model_validate(row),
            position=queue_status.position,
            estimated_wait_time=queue_status.estimated_wait_time,
        )

    async def _send_confirmation(self, appointment: dict[str, Any], now: datetime) -> None:
        subject, body = NotificationService.build_confirmation_email(
            appointment, ZoneInfo(settings.queue_timezone)
        )
        notification = await NotificationService.insert_notification(
            self.db,
            appointment_id=appointment["id"],
            notification_type=NotificationType.CONFIRMATION,
            email_content=body,
            email_sent=False,
            notification_time=ensure_utc(now),
        )
        await self.db.commit()

        if self.mail_transport is None:
            return

        try:
            delivered = await self.mail_transport.send_email(appointment["email"], subject, body)
        except Exception as e:
            # Log error but don't fail the booking
            logger.warning(
                "failed_to_send_confirmation",
                queue_number=appointment["queue_number"],
                error=str(e),
            )
            return

        if delivered:
            await NotificationService.mark_sent(self.db, notification["id"])

    async def _get_row(self, appointment_id: UUID) -> dict[str, Any]:
        result = await self.db.execute(select(appointments).where(appointments.c.id == appointment_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def get_appointment(self, appointment_id: UUID) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
        """
        return AppointmentResponse.model_validate(await self._get_row(appointment_id))

    async def get_by_queue_number(self, queue_number: str) -> AppointmentResponse:
        """
        Get appointment by queue number.

        Raises:
            NotFoundException: If no appointment carries this queue number
        """
        row = await QueueService(self.db, self.settings_service).find_by_queue_number(queue_number)
        if row is None:
            raise NotFoundException("Queue number not found")
        return AppointmentResponse.model_validate(row)

    async def list_appointments(self, filters: AppointmentFilters) -> AppointmentListResponse:
        """
        List appointments for the staff dashboard, newest first.

        Args:
            filters: Optional status and booking date filters

        Returns:
            Matching appointments
        """
        conditions = []

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        if filters.booking_date:
            conditions.append(
                appointments.c.queue_number.startswith(
                    queue_day_prefix(f"{filters.booking_date:%Y%m%d}")
                )
            )

        stmt = select(appointments).order_by(appointments.c.created_at.desc())
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self.db.execute(stmt)
        items = [AppointmentResponse.model_validate(dict(row)) for row in result.mappings()]
        return AppointmentListResponse(total=len(items), items=items)

    async def list_waiting(self) -> list[dict[str, Any]]:
        """All appointments still waiting, in queue order."""
        stmt = (
            select(appointments)
            .where(appointments.c.status == AppointmentStatus.WAITING.value)
            .order_by(appointments.c.queue_number)
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings()]

    async def _update(self, appointment_id: UUID, values: dict[str, Any]) -> AppointmentResponse:
        stmt = (
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(**values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        await self.db.commit()

        if not row:
            raise NotFoundException("Appointment not found")
        return AppointmentResponse.model_validate(dict(row))

    async def update_appointment_status(
        self,
        appointment_id: UUID,
        data: AppointmentStatusUpdate,
        now: datetime,
    ) -> AppointmentResponse:
        """
        Move an appointment to a new status, optionally replacing its notes.

        Raises:
            NotFoundException: If appointment not found
        """
        current = await self._get_row(appointment_id)

        values: dict[str, Any] = {"status": data.status.value, "updated_at": now}
        if data.notes:
            values["additional_notes"] = data.notes

        appointment = await self._update(appointment_id, values)
        logger.info(
            "appointment_status_updated",
            queue_number=current["queue_number"],
            old_status=current["status"],
            new_status=data.status.value,
        )
        return appointment

    async def cancel_appointment(self, appointment_id: UUID, now: datetime) -> AppointmentResponse:
        """
        Cancel an appointment that is waiting or completed.

        Raises:
            NotFoundException: If appointment not found
            BadRequestException: If the appointment is in progress or already cancelled
        """
        current = await self._get_row(appointment_id)
        if AppointmentStatus(current["status"]) not in CANCELLABLE_STATUSES:
            raise BadRequestException(
                f"Cannot cancel an appointment that is {current['status']}"
            )

        appointment = await self._update(
            appointment_id,
            {"status": AppointmentStatus.CANCELLED.value, "updated_at": now},
        )
        logger.info("appointment_cancelled", queue_number=current["queue_number"])
        return appointment

    async def update_notes(
        self,
        appointment_id: UUID,
        notes: str,
        now: datetime,
    ) -> AppointmentResponse:
        """
        Replace the notes on an appointment.

        Raises:
            NotFoundException: If appointment not found
        """
        await self._get_row(appointment_id)
        return await self._update(appointment_id, {"additional_notes": notes, "updated_at": now})
