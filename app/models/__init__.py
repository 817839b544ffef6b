"""Database models."""

from app.models.appointments import appointments, metadata
from app.models.notifications import notifications
from app.models.queue_settings import queue_settings

__all__ = [
    "appointments",
    "metadata",
    "notifications",
    "queue_settings",
]
