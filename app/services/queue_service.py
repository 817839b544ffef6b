"""Queue position and wait-time estimation."""

import math
import re
from datetime import date, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import ensure_utc, queue_date
from app.models.appointments import appointments
from app.schemas.appointments import AppointmentStatus
from app.schemas.queue import QueueStatus, QueueSummary
from app.services.queue_settings_service import QueueSettingsService

logger = structlog.get_logger(__name__)

QUEUE_NUMBER_PREFIX = "PHAR"
QUEUE_NUMBER_PATTERN = re.compile(r"^PHAR-(\d{8})-(\d{3,})$")


def format_queue_number(booking_date: date, sequence: int) -> str:
    """Build ``PHAR-YYYYMMDD-NNN`` for the given day and sequence."""
    return f"{QUEUE_NUMBER_PREFIX}-{booking_date:%Y%m%d}-{sequence:03d}"


def queue_day_prefix(date_segment: str) -> str:
    """Prefix shared by every queue number issued on one day."""
    return f"{QUEUE_NUMBER_PREFIX}-{date_segment}-"


def parse_queue_date(queue_number: str) -> str | None:
    """Return the 8-digit date segment of a queue number, or None if malformed."""
    match = QUEUE_NUMBER_PATTERN.match(queue_number)
    if not match:
        return None
    return match.group(1)


class QueueService:
    """Compute live queue status for a queue number."""

    def __init__(self, db: AsyncSession, settings_service: QueueSettingsService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.settings_service = settings_service or QueueSettingsService()

    async def find_by_queue_number(self, queue_number: str) -> dict[str, Any] | None:
        """Exact lookup of an appointment by its queue number."""
        stmt = select(appointments).where(appointments.c.queue_number == queue_number)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        return dict(row) if row else None

    async def count_waiting_before(
        self,
        date_segment: str,
        queue_number: str,
        exclude_id: UUID | None = None,
    ) -> int:
        """
        Count same-day waiting appointments that sort before ``queue_number``.

        Queue numbers are fixed width, so string order matches booking order.
        """
        conditions = [
            appointments.c.queue_number.startswith(queue_day_prefix(date_segment), autoescape=True),
            appointments.c.status == AppointmentStatus.WAITING.value,
            appointments.c.queue_number < queue_number,
        ]
        if exclude_id is not None:
            conditions.append(appointments.c.id != exclude_id)

        stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_summary(self, now: datetime) -> QueueSummary:
        """
        Count today's waiting customers alongside the average service time.

        Args:
            now: Current time; the day is taken in the pharmacy's timezone

        Returns:
            Summary for the day containing ``now``
        """
        today = queue_date(now)
        stmt = (
            select(func.count())
            .select_from(appointments)
            .where(
                appointments.c.queue_number.startswith(
                    queue_day_prefix(f"{today:%Y%m%d}"), autoescape=True
                ),
                appointments.c.status == AppointmentStatus.WAITING.value,
            )
        )
        result = await self.db.execute(stmt)

        return QueueSummary(
            queue_date=today,
            people_waiting=result.scalar() or 0,
            average_wait_time=await self.settings_service.get_average_wait_time(self.db),
        )

    async def get_queue_status(self, queue_number: str, now: datetime) -> QueueStatus:
        """
        Get the current status of a queue number.

        Args:
            queue_number: Ticket to look up, possibly malformed or unknown
            now: Current time supplied by the caller

        Returns:
            Queue status; ``is_valid`` is False when the ticket does not exist
        """
        appointment = await self.find_by_queue_number(queue_number)
        if appointment is None:
            return QueueStatus.invalid(queue_number, now)

        created_at = ensure_utc(appointment["created_at"])
        status = AppointmentStatus(appointment["status"])

        if status != AppointmentStatus.WAITING:
            return QueueStatus(
                is_valid=True,
                queue_number=queue_number,
                people_ahead=0,
                estimated_wait_time=0,
                status=status,
                last_updated=now,
                appointment_created_time=created_at,
            )

        date_segment = parse_queue_date(queue_number)
        if date_segment is None:
            logger.warning("queue_number_malformed", queue_number=queue_number)
            people_ahead = 0
        else:
            people_ahead = await self.count_waiting_before(
                date_segment, queue_number, exclude_id=appointment["id"]
            )

        average_wait_time = await self.settings_service.get_average_wait_time(self.db)

        return QueueStatus(
            is_valid=True,
            queue_number=queue_number,
            people_ahead=people_ahead,
            estimated_wait_time=estimate_wait_time(
                people_ahead, average_wait_time, created_at, now
            ),
            status=status,
            last_updated=now,
            appointment_created_time=created_at,
        )


def estimate_wait_time(
    people_ahead: int,
    average_wait_time: int,
    created_at: datetime,
    now: datetime,
) -> int:
    """
    Minutes left to wait, decayed by time already spent in the queue.

    Service is assumed to run in queue order at ``average_wait_time`` minutes
    per customer. Never negative.
    """
    raw_total_wait = (people_ahead + 1) * average_wait_time
    elapsed_seconds = (ensure_utc(now) - ensure_utc(created_at)).total_seconds()
    # A "now" earlier than the booking (clock skew) counts as no time elapsed
    minutes_elapsed = max(0, math.floor(elapsed_seconds / 60))
    return max(0, raw_total_wait - minutes_elapsed)
