"""Notification model for tracking emails sent about an appointment."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from app.models.appointments import metadata

notifications = Table(
    "notifications",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("notification_type", String(50), nullable=False),
    Column("email_content", Text, nullable=False),
    Column("email_sent", Boolean, nullable=False, server_default=text("false")),
    Column(
        "notification_time",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    CheckConstraint(
        "notification_type IN ('confirmation', '10_minute_reminder', '5_minute_reminder')",
        name="notifications_type_check",
    ),
    Index("idx_notifications_appointment_type", "appointment_id", "notification_type"),
)
