"""Queue settings table (single configuration row)."""

from datetime import time

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    Table,
    Time,
    func,
    text,
)

from app.models.appointments import metadata

queue_settings = Table(
    "queue_settings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Minutes budgeted per served customer
    Column("average_wait_time", Integer, nullable=False, server_default=text("15")),
    Column("max_daily_bookings", Integer, nullable=False, server_default=text("50")),
    Column("working_hours_start", Time, nullable=False, default=time(9, 0)),
    Column("working_hours_end", Time, nullable=False, default=time(17, 0)),
    Column("is_holiday", Boolean, nullable=False, server_default=text("false")),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "average_wait_time BETWEEN 1 AND 60",
        name="queue_settings_average_wait_time_check",
    ),
    CheckConstraint(
        "max_daily_bookings BETWEEN 1 AND 100",
        name="queue_settings_max_daily_bookings_check",
    ),
)
