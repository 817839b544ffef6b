"""Tests for admin endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from app.core.clock import utcnow
from tests.helpers import ADMIN_HEADERS, at


@pytest.mark.asyncio
class TestAdminAccess:
    """Tests for the admin secret check."""

    async def test_missing_secret_rejected(self, client: AsyncClient):
        """Test admin routes without the header fail."""
        response = await client.get("/api/v1/admin/appointments")

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid admin secret key"

    async def test_wrong_secret_rejected(self, client: AsyncClient):
        """Test admin routes with a wrong secret fail."""
        response = await client.put(
            "/api/v1/admin/settings",
            json={"average_wait_time": 5},
            headers={"X-Admin-Secret": "guess"},
        )

        assert response.status_code == 401


@pytest.mark.asyncio
class TestAdminAppointmentEndpoints:
    """Tests for admin appointment management endpoints."""

    async def test_list_appointments(self, client: AsyncClient, add_appointment):
        """Test listing returns newest first."""
        await add_appointment("PHAR-20250115-001", at(9, 0))
        await add_appointment("PHAR-20250115-002", at(9, 5))

        response = await client.get("/api/v1/admin/appointments", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["queue_number"] for item in data["items"]] == [
            "PHAR-20250115-002",
            "PHAR-20250115-001",
        ]

    async def test_list_appointments_with_filters(self, client: AsyncClient, add_appointment):
        """Test filtering by status and booking date."""
        await add_appointment("PHAR-20250114-001", at(9, 0, day=14))
        await add_appointment("PHAR-20250115-001", at(9, 0), status="completed")
        await add_appointment("PHAR-20250115-002", at(9, 5))

        by_status = await client.get(
            "/api/v1/admin/appointments",
            params={"status": "waiting"},
            headers=ADMIN_HEADERS,
        )
        by_date = await client.get(
            "/api/v1/admin/appointments",
            params={"date": "2025-01-15"},
            headers=ADMIN_HEADERS,
        )
        both = await client.get(
            "/api/v1/admin/appointments",
            params={"status": "waiting", "date": "2025-01-15"},
            headers=ADMIN_HEADERS,
        )

        assert by_status.json()["total"] == 2
        assert by_date.json()["total"] == 2
        assert [item["queue_number"] for item in both.json()["items"]] == ["PHAR-20250115-002"]

    async def test_update_status(self, client: AsyncClient, add_appointment):
        """Test moving an appointment through the queue."""
        appointment = await add_appointment("PHAR-20250115-001", at(9, 0))

        response = await client.patch(
            f"/api/v1/admin/appointments/{appointment['id']}/status",
            json={"status": "in_progress", "notes": "At counter 2"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "in_progress"
        assert data["additional_notes"] == "At counter 2"
        assert data["updated_at"] is not None

    async def test_completed_appointment_leaves_queue(self, client: AsyncClient, add_appointment):
        """Test that people behind move up once an appointment is completed."""
        first = await add_appointment("PHAR-20250115-001", at(9, 0))
        await add_appointment("PHAR-20250115-002", at(9, 1))

        await client.patch(
            f"/api/v1/admin/appointments/{first['id']}/status",
            json={"status": "completed"},
            headers=ADMIN_HEADERS,
        )
        finished = await client.get("/api/v1/queue/status/PHAR-20250115-001")
        behind = await client.get("/api/v1/queue/status/PHAR-20250115-002")

        assert finished.json()["estimated_wait_time"] == 0
        assert finished.json()["people_ahead"] == 0
        assert behind.json()["people_ahead"] == 0

    async def test_update_status_invalid_value(self, client: AsyncClient, add_appointment):
        """Test unknown statuses are rejected."""
        appointment = await add_appointment("PHAR-20250115-001", at(9, 0))

        response = await client.patch(
            f"/api/v1/admin/appointments/{appointment['id']}/status",
            json={"status": "no_show"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 422

    async def test_update_status_not_found(self, client: AsyncClient):
        """Test updating an unknown appointment."""
        response = await client.patch(
            f"/api/v1/admin/appointments/{uuid4()}/status",
            json={"status": "completed"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Appointment not found"

    @pytest.mark.parametrize("current_status", ["waiting", "completed"])
    async def test_cancel_appointment(self, client: AsyncClient, add_appointment, current_status):
        """Test cancelling waiting and completed appointments."""
        appointment = await add_appointment("PHAR-20250115-001", at(9, 0), status=current_status)

        response = await client.post(
            f"/api/v1/admin/appointments/{appointment['id']}/cancel",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    @pytest.mark.parametrize("current_status", ["in_progress", "cancelled"])
    async def test_cancel_appointment_not_allowed(
        self, client: AsyncClient, add_appointment, current_status
    ):
        """Test in-progress and cancelled appointments cannot be cancelled."""
        appointment = await add_appointment("PHAR-20250115-001", at(9, 0), status=current_status)

        response = await client.post(
            f"/api/v1/admin/appointments/{appointment['id']}/cancel",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        assert current_status in response.json()["message"]

    async def test_update_notes(self, client: AsyncClient, add_appointment):
        """Test replacing staff notes."""
        appointment = await add_appointment("PHAR-20250115-001", at(9, 0))

        response = await client.put(
            f"/api/v1/admin/appointments/{appointment['id']}/notes",
            json={"notes": "Bring insurance card"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["additional_notes"] == "Bring insurance card"

    async def test_notifications_for_unknown_appointment(self, client: AsyncClient):
        """Test notification history of a missing appointment."""
        response = await client.get(
            f"/api/v1/admin/appointments/{uuid4()}/notifications",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 404


@pytest.mark.asyncio
class TestAdminSettingsEndpoints:
    """Tests for queue settings management."""

    async def test_get_default_settings(self, client: AsyncClient):
        """Test defaults are returned before anything is saved."""
        response = await client.get("/api/v1/admin/settings", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["average_wait_time"] == 15
        assert data["max_daily_bookings"] == 50

    async def test_update_settings(self, client: AsyncClient):
        """Test saving and then partially updating settings."""
        created = await client.put(
            "/api/v1/admin/settings",
            json={"average_wait_time": 10, "working_hours_end": "18:30"},
            headers=ADMIN_HEADERS,
        )
        updated = await client.put(
            "/api/v1/admin/settings",
            json={"max_daily_bookings": 80},
            headers=ADMIN_HEADERS,
        )

        assert created.status_code == 200
        assert created.json()["working_hours_end"] == "18:30:00"
        assert updated.status_code == 200
        data = updated.json()
        assert data["average_wait_time"] == 10
        assert data["max_daily_bookings"] == 80

    async def test_average_wait_time_drives_estimates(self, client: AsyncClient, add_appointment):
        """Test a new average is used by the next queue status lookup."""
        await client.put(
            "/api/v1/admin/settings",
            json={"average_wait_time": 20},
            headers=ADMIN_HEADERS,
        )
        await add_appointment("PHAR-20990115-001", utcnow())
        await add_appointment("PHAR-20990115-002", utcnow())

        response = await client.get("/api/v1/queue/status/PHAR-20990115-002")

        assert response.status_code == 200
        assert response.json()["estimated_wait_time"] == 40

    @pytest.mark.parametrize(
        "payload",
        [
            {"average_wait_time": 0},
            {"average_wait_time": 61},
            {"max_daily_bookings": 101},
            {"working_hours_start": "17:00", "working_hours_end": "09:00"},
        ],
    )
    async def test_update_settings_validation(self, client: AsyncClient, payload: dict):
        """Test out-of-range settings are rejected."""
        response = await client.put("/api/v1/admin/settings", json=payload, headers=ADMIN_HEADERS)

        assert response.status_code == 422
