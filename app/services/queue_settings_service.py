"""Queue settings service."""

from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import utcnow
from app.core.redis_client import CacheManager
from app.models.queue_settings import queue_settings
from app.schemas.queue_settings import QueueSettingsResponse, QueueSettingsUpdate


class QueueSettingsService:
    """Read and update the singleton queue settings row."""

    CACHE_KEY = "queue_settings"

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    async def get_settings(self, db: AsyncSession) -> dict[str, Any] | None:
        """
        Get the settings row, or None if none has been saved.

        Values served from the cache are JSON-decoded, so times come back
        as ISO strings.
        """
        if self.cache:
            cached = self.cache.get_json(self.CACHE_KEY)
            if cached:
                return cached

        query = select(queue_settings).order_by(queue_settings.c.id).limit(1)
        result = await db.execute(query)
        row = result.mappings().first()

        if not row:
            return None

        row_dict = dict(row)
        if self.cache:
            self.cache.set_json(self.CACHE_KEY, row_dict, ttl=settings.queue_settings_cache_ttl)
        return row_dict

    async def get_average_wait_time(self, db: AsyncSession) -> int:
        """Minutes budgeted per customer, falling back to the default."""
        row = await self.get_settings(db)
        if row is None:
            return settings.default_average_wait_time
        return int(row["average_wait_time"])

    async def get_max_daily_bookings(self, db: AsyncSession) -> int | None:
        """Daily booking cap, or None when no settings row exists."""
        row = await self.get_settings(db)
        if row is None:
            return None
        return int(row["max_daily_bookings"])

    async def get_effective_settings(self, db: AsyncSession) -> QueueSettingsResponse:
        """Settings as the queue sees them, defaults included."""
        row = await self.get_settings(db)
        if row is None:
            return QueueSettingsResponse(
                average_wait_time=settings.default_average_wait_time,
                max_daily_bookings=settings.default_max_daily_bookings,
                working_hours_start="09:00",
                working_hours_end="17:00",
                is_holiday=False,
            )
        return QueueSettingsResponse.model_validate(row)

    async def update_settings(
        self,
        db: AsyncSession,
        data: QueueSettingsUpdate,
    ) -> QueueSettingsResponse:
        """Apply a partial update, creating the row on first use."""
        values = data.model_dump(exclude_unset=True, exclude_none=True)
        values["updated_at"] = utcnow()

        existing = await db.execute(select(queue_settings.c.id).order_by(queue_settings.c.id).limit(1))
        setting_id = existing.scalar()

        if setting_id is None:
            values.setdefault("average_wait_time", settings.default_average_wait_time)
            values.setdefault("max_daily_bookings", settings.default_max_daily_bookings)
            stmt = insert(queue_settings).values(**values).returning(queue_settings)
        else:
            stmt = (
                update(queue_settings)
                .where(queue_settings.c.id == setting_id)
                .values(**values)
                .returning(queue_settings)
            )

        result = await db.execute(stmt)
        row = result.mappings().first()
        await db.commit()

        if self.cache:
            self.cache.delete(self.CACHE_KEY)

        return QueueSettingsResponse.model_validate(dict(row))
