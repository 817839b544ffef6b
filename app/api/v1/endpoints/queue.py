"""Queue status endpoints."""

from fastapi import APIRouter, status

from app.core.clock import utcnow
from app.core.exceptions import NotFoundException
from app.dependencies import DatabaseSession, SettingsService
from app.schemas.queue import QueueStatus, QueueSummary
from app.schemas.queue_settings import QueueSettingsResponse
from app.services.queue_service import QueueService

router = APIRouter()


@router.get(
    "/status/{queue_number}",
    response_model=QueueStatus,
    status_code=status.HTTP_200_OK,
    summary="Get live queue status",
)
async def get_queue_status(
    queue_number: str,
    db: DatabaseSession,
    settings_service: SettingsService,
) -> QueueStatus:
    """
    Get position and estimated wait for a queue number.

    Args:
        queue_number: Ticket such as PHAR-20250115-007
        db: Database session
        settings_service: Queue settings service

    Returns:
        Live queue status

    Raises:
        NotFoundException: If the queue number does not exist
    """
    service = QueueService(db, settings_service)
    queue_status = await service.get_queue_status(queue_number, utcnow())

    if not queue_status.is_valid:
        raise NotFoundException("Queue not found")

    return queue_status


@router.get(
    "/settings",
    response_model=QueueSettingsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get public queue settings",
)
async def get_queue_settings(
    db: DatabaseSession,
    settings_service: SettingsService,
) -> QueueSettingsResponse:
    """Average service time, daily capacity and opening hours."""
    return await settings_service.get_effective_settings(db)


@router.get(
    "/summary",
    response_model=QueueSummary,
    status_code=status.HTTP_200_OK,
    summary="Get today's queue summary",
)
async def get_queue_summary(
    db: DatabaseSession,
    settings_service: SettingsService,
) -> QueueSummary:
    """How many customers are waiting today and the average time per customer."""
    service = QueueService(db, settings_service)
    return await service.get_summary(utcnow())
