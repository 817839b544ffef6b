import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime
from typing import Any

# Settings are read at import time; keep tests off real services
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_pharmacy_queue.db")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

from app.config import settings
from app.database import enable_sqlite_foreign_keys, get_db
from app.dependencies import get_cache_manager, get_mail_transport
from app.main import app
from app.models import appointments, metadata, notifications, queue_settings
from tests.helpers import FakeMailTransport

# Optional server database for tests; MUST be different from the app database
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

if TEST_DATABASE_URL and TEST_DATABASE_URL == settings.database_url:
    raise RuntimeError(
        "TEST_DATABASE_URL is the same as DATABASE_URL; tests would drop application data."
    )


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test engine with a fresh schema."""
    if TEST_DATABASE_URL:
        engine = create_async_engine(
            TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://"),
            poolclass=NullPool,
        )
    else:
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
            poolclass=NullPool,
        )
        enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mail_transport() -> FakeMailTransport:
    """Fake mail transport that accepts every message."""
    return FakeMailTransport()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    mail_transport: FakeMailTransport,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_manager] = lambda: None
    app.dependency_overrides[get_mail_transport] = lambda: mail_transport

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_booking_data() -> dict:
    """Sample booking form for testing."""
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+1 416-555-0199",
        "purpose": "Prescription pickup",
    }


AddAppointment = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture
def add_appointment(session_factory: async_sessionmaker[AsyncSession]) -> AddAppointment:
    """Insert an appointment row directly, bypassing booking."""

    async def _add(
        queue_number: str,
        created_at: datetime,
        status: str = "waiting",
        email: str = "customer@example.com",
        name: str = "Test Customer",
    ) -> dict[str, Any]:
        values = {
            "name": name,
            "email": email,
            "phone": "4165550100",
            "purpose": "Consultation",
            "queue_number": queue_number,
            "status": status,
            "created_at": created_at,
        }
        async with session_factory() as session:
            result = await session.execute(
                insert(appointments).values(**values).returning(appointments)
            )
            row = dict(result.mappings().one())
            await session.commit()
        return row

    return _add


@pytest.fixture
def set_queue_settings(session_factory: async_sessionmaker[AsyncSession]):
    """Insert the queue settings row."""

    async def _set(average_wait_time: int = 15, max_daily_bookings: int = 50) -> None:
        async with session_factory() as session:
            await session.execute(
                insert(queue_settings).values(
                    average_wait_time=average_wait_time,
                    max_daily_bookings=max_daily_bookings,
                )
            )
            await session.commit()

    return _set


@pytest.fixture
def count_notifications(session_factory: async_sessionmaker[AsyncSession]):
    """Count notifications, optionally for one appointment and type."""

    async def _count(appointment_id=None, notification_type: str | None = None) -> int:
        stmt = select(func.count()).select_from(notifications)
        if appointment_id is not None:
            stmt = stmt.where(notifications.c.appointment_id == appointment_id)
        if notification_type is not None:
            stmt = stmt.where(notifications.c.notification_type == notification_type)
        async with session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    return _count
