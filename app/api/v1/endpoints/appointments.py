"""Public appointment booking endpoints."""

from fastapi import APIRouter, status

from app.core.clock import utcnow
from app.dependencies import DatabaseSession, Mailer, SettingsService
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentResponse,
    BookingResponse,
)
from app.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Book an appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    db: DatabaseSession,
    settings_service: SettingsService,
    mailer: Mailer,
) -> BookingResponse:
    """
    Book a visit and receive today's next queue number.

    Args:
        data: Booking form data
        db: Database session
        settings_service: Queue settings service
        mailer: Mail transport for the confirmation email

    Returns:
        Created appointment with position and estimated wait
    """
    service = AppointmentService(db, settings_service, mailer)
    return await service.create_appointment(data, utcnow())


@router.get(
    "/{queue_number}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Get appointment by queue number",
)
async def get_appointment(
    queue_number: str,
    db: DatabaseSession,
    settings_service: SettingsService,
) -> AppointmentResponse:
    """
    Get the booking behind a queue number.

    Raises:
        NotFoundException: If no appointment carries this queue number
    """
    service = AppointmentService(db, settings_service)
    return await service.get_by_queue_number(queue_number)
