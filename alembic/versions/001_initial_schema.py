"""Initial schema - appointments, notifications and queue settings.

Revision ID: 001
Revises:
Create Date: 2025-03-21 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("purpose", sa.String(length=500), nullable=False),
        sa.Column("additional_notes", sa.String(length=500), nullable=True),
        sa.Column("queue_number", sa.String(length=20), nullable=True),
        sa.Column("status", sa.Text(), server_default="waiting", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('waiting', 'in_progress', 'completed', 'cancelled')",
            name="appointments_status_check",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("queue_number"),
    )
    op.create_index("idx_appointments_status", "appointments", ["status"])
    op.create_index("idx_appointments_created_at", "appointments", ["created_at"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("appointment_id", sa.Uuid(), nullable=False),
        sa.Column("notification_type", sa.String(length=50), nullable=False),
        sa.Column("email_content", sa.Text(), nullable=False),
        sa.Column("email_sent", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "notification_time",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "notification_type IN ('confirmation', '10_minute_reminder', '5_minute_reminder')",
            name="notifications_type_check",
        ),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notifications_appointment_type",
        "notifications",
        ["appointment_id", "notification_type"],
    )

    op.create_table(
        "queue_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("average_wait_time", sa.Integer(), server_default=sa.text("15"), nullable=False),
        sa.Column("max_daily_bookings", sa.Integer(), server_default=sa.text("50"), nullable=False),
        sa.Column("working_hours_start", sa.Time(), nullable=False),
        sa.Column("working_hours_end", sa.Time(), nullable=False),
        sa.Column("is_holiday", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "average_wait_time BETWEEN 1 AND 60",
            name="queue_settings_average_wait_time_check",
        ),
        sa.CheckConstraint(
            "max_daily_bookings BETWEEN 1 AND 100",
            name="queue_settings_max_daily_bookings_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("queue_settings")
    op.drop_index("idx_notifications_appointment_type", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_appointments_created_at", table_name="appointments")
    op.drop_index("idx_appointments_status", table_name="appointments")
    op.drop_table("appointments")
