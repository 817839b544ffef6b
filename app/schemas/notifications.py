"""Appointment notification schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class NotificationType(str, Enum):
    """Kinds of email recorded against an appointment."""

    CONFIRMATION = "confirmation"
    TEN_MINUTE_REMINDER = "10_minute_reminder"
    FIVE_MINUTE_REMINDER = "5_minute_reminder"


class NotificationResponse(BaseModel):
    """Schema for a recorded notification."""

    id: UUID
    appointment_id: UUID
    notification_type: NotificationType
    email_content: str
    email_sent: bool
    notification_time: datetime

    model_config = {"from_attributes": True}
