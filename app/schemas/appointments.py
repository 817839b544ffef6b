"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.core.clock import ensure_utc


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses staff may cancel from
CANCELLABLE_STATUSES = frozenset({AppointmentStatus.WAITING, AppointmentStatus.COMPLETED})

# Purpose chosen when none of the listed reasons apply; notes are folded into it
OTHER_PURPOSE = "Other"
PURPOSE_MAX_LENGTH = 500


class AppointmentBase(BaseModel):
    """Base appointment schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=100)
    phone: str = Field(..., min_length=7, max_length=20)
    purpose: str = Field(..., min_length=1, max_length=PURPOSE_MAX_LENGTH)
    additional_notes: str | None = Field(None, max_length=500)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        # Remove common separators
        cleaned = (
            v.replace("-", "").replace(" ", "").replace("(", "").replace(")", "").replace("+", "")
        )
        if not cleaned.isdigit():
            raise ValueError("Phone number must contain only digits and separators")
        if len(cleaned) < 7:
            raise ValueError("Phone number must have at least 7 digits")
        return v

    @field_validator("name", "purpose")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        """Reject values that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v


class AppointmentCreate(AppointmentBase):
    """Schema for booking a new appointment."""

    @property
    def stored_purpose(self) -> str:
        """Purpose as saved; "Other" carries the customer's notes."""
        if self.purpose == OTHER_PURPOSE and self.additional_notes:
            return f"{OTHER_PURPOSE} - {self.additional_notes}"
        return self.purpose

    @model_validator(mode="after")
    def validate_stored_purpose(self) -> "AppointmentCreate":
        """Reject notes that would not fit once folded into the purpose."""
        if len(self.stored_purpose) > PURPOSE_MAX_LENGTH:
            raise ValueError(
                f"Purpose and notes together must be at most {PURPOSE_MAX_LENGTH} characters"
            )
        return self


class AppointmentResponse(AppointmentBase):
    """Schema for appointment response."""

    id: UUID
    email: str
    queue_number: str | None
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime | None) -> datetime | None:
        """Report timestamps as aware UTC."""
        return ensure_utc(v) if v else v


class BookingResponse(BaseModel):
    """Appointment just booked, with its place in the queue."""

    appointment: AppointmentResponse
    position: int
    estimated_wait_time: int


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus
    notes: str | None = Field(None, max_length=500)


class AppointmentNotesUpdate(BaseModel):
    """Schema for replacing staff notes."""

    notes: str = Field(..., max_length=500)


class AppointmentListResponse(BaseModel):
    """Schema for appointment list response."""

    total: int
    items: list[AppointmentResponse]


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    status: AppointmentStatus | None = None
    booking_date: date | None = None
