"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
    func,
)

# Metadata for all tables
metadata = MetaData()

# Appointments table
appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Customer details
    Column("name", String(100), nullable=False),
    Column("email", String(100), nullable=False),
    Column("phone", String(20), nullable=False),
    Column("purpose", String(500), nullable=False),
    Column("additional_notes", String(500), nullable=True),
    # Queue ticket, PHAR-YYYYMMDD-NNN
    Column("queue_number", String(20), nullable=True, unique=True),
    # Status management
    Column("status", Text, nullable=False, server_default="waiting"),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=True),
    # Constraints
    CheckConstraint(
        "status IN ('waiting', 'in_progress', 'completed', 'cancelled')",
        name="appointments_status_check",
    ),
    Index("idx_appointments_status", "status"),
    Index("idx_appointments_created_at", "created_at"),
)
