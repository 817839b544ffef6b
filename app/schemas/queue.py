"""Queue status schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.appointments import AppointmentStatus


class QueueStatus(BaseModel):
    """Live position and wait estimate for a queue number."""

    is_valid: bool = Field(..., description="False when the queue number does not exist")
    queue_number: str
    people_ahead: int = Field(..., ge=0)
    estimated_wait_time: int = Field(..., ge=0, description="Minutes")
    status: AppointmentStatus
    last_updated: datetime
    appointment_created_time: datetime

    @classmethod
    def invalid(cls, queue_number: str, now: datetime) -> "QueueStatus":
        """Sentinel for queue numbers that do not exist."""
        return cls(
            is_valid=False,
            queue_number=queue_number,
            people_ahead=0,
            estimated_wait_time=0,
            status=AppointmentStatus.WAITING,
            last_updated=now,
            appointment_created_time=now,
        )

    @property
    def position(self) -> int:
        """One-based place in the queue."""
        return self.people_ahead + 1


class QueueSummary(BaseModel):
    """Today's queue at a glance for the public landing page."""

    queue_date: date
    people_waiting: int = Field(..., ge=0)
    average_wait_time: int = Field(..., ge=0, description="Minutes per customer")
