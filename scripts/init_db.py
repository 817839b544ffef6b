"""Script to initialize the database."""

import asyncio

from sqlalchemy import func, insert, select

from app.config import settings
from app.database import AsyncSessionLocal, engine
from app.models import metadata, queue_settings


async def init_db() -> None:
    """Create all tables and seed the default queue settings row."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(func.count()).select_from(queue_settings))
        if not existing.scalar():
            await session.execute(
                insert(queue_settings).values(
                    average_wait_time=settings.default_average_wait_time,
                    max_daily_bookings=settings.default_max_daily_bookings,
                )
            )
            await session.commit()
            print("✓ Default queue settings created")

    await engine.dispose()
    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
