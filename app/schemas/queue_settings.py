"""Queue settings schemas."""

from datetime import datetime, time

from pydantic import BaseModel, Field, model_validator


class QueueSettingsResponse(BaseModel):
    """Current queue configuration."""

    average_wait_time: int
    max_daily_bookings: int
    working_hours_start: time
    working_hours_end: time
    is_holiday: bool
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class QueueSettingsUpdate(BaseModel):
    """Partial update of the queue configuration."""

    average_wait_time: int | None = Field(None, ge=1, le=60)
    max_daily_bookings: int | None = Field(None, ge=1, le=100)
    working_hours_start: time | None = None
    working_hours_end: time | None = None
    is_holiday: bool | None = None

    @model_validator(mode="after")
    def validate_hours(self) -> "QueueSettingsUpdate":
        """Validate working hours ordering when both are given."""
        if self.working_hours_start and self.working_hours_end:
            if self.working_hours_end <= self.working_hours_start:
                raise ValueError("Working hours must end after they start")
        return self
