"""Staff endpoints for managing the queue."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.core.clock import utcnow
from app.dependencies import AdminAccess, DatabaseSession, SettingsService
from app.schemas.appointments import (
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentNotesUpdate,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
)
from app.schemas.notifications import NotificationResponse
from app.schemas.queue_settings import QueueSettingsResponse, QueueSettingsUpdate
from app.services.appointment_service import AppointmentService
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/admin", dependencies=[AdminAccess])


@router.get(
    "/appointments",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    db: DatabaseSession,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    booking_date: date | None = Query(None, alias="date", description="YYYY-MM-DD"),
) -> AppointmentListResponse:
    """
    List appointments, newest first.

    Args:
        db: Database session
        status_filter: Filter by status
        booking_date: Filter by the day the queue number was issued

    Returns:
        Matching appointments
    """
    filters = AppointmentFilters(status=status_filter, booking_date=booking_date)
    return await AppointmentService(db).list_appointments(filters)


@router.patch(
    "/appointments/{appointment_id}/status",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Update appointment status",
)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Move an appointment to waiting, in progress, completed or cancelled."""
    return await AppointmentService(db).update_appointment_status(appointment_id, data, utcnow())


@router.post(
    "/appointments/{appointment_id}/cancel",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Cancel a waiting or completed appointment.

    Raises:
        BadRequestException: If the appointment is in progress or already cancelled
    """
    return await AppointmentService(db).cancel_appointment(appointment_id, utcnow())


@router.put(
    "/appointments/{appointment_id}/notes",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Replace appointment notes",
)
async def update_appointment_notes(
    appointment_id: UUID,
    data: AppointmentNotesUpdate,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Replace the notes on an appointment."""
    return await AppointmentService(db).update_notes(appointment_id, data.notes, utcnow())


@router.get(
    "/appointments/{appointment_id}/notifications",
    response_model=list[NotificationResponse],
    status_code=status.HTTP_200_OK,
    summary="List notifications for an appointment",
)
async def list_appointment_notifications(
    appointment_id: UUID,
    db: DatabaseSession,
) -> list[NotificationResponse]:
    """Confirmation and reminder emails recorded for an appointment."""
    await AppointmentService(db).get_appointment(appointment_id)
    return await NotificationService.list_for_appointment(db, appointment_id)


@router.get(
    "/settings",
    response_model=QueueSettingsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get queue settings",
)
async def get_settings(
    db: DatabaseSession,
    settings_service: SettingsService,
) -> QueueSettingsResponse:
    """Current queue settings, defaults included."""
    return await settings_service.get_effective_settings(db)


@router.put(
    "/settings",
    response_model=QueueSettingsResponse,
    status_code=status.HTTP_200_OK,
    summary="Update queue settings",
)
async def update_settings(
    data: QueueSettingsUpdate,
    db: DatabaseSession,
    settings_service: SettingsService,
) -> QueueSettingsResponse:
    """Update the queue settings and invalidate the cached copy."""
    return await settings_service.update_settings(db, data)
