#!/usr/bin/env python3
"""
Run the reminder pass outside the API process.

Usage:
    python scripts/run_reminders.py --once
    python scripts/run_reminders.py
"""

import argparse
import asyncio

from app.config import settings
from app.core.clock import utcnow
from app.core.scheduler import PeriodicTask
from app.database import AsyncSessionLocal, engine
from app.middleware.logging import configure_logging
from app.services.email_service import EmailService
from app.services.reminder_service import ReminderService


async def run(once: bool) -> None:
    """Run one reminder pass, or loop until interrupted."""
    service = ReminderService(session_factory=AsyncSessionLocal, mail_transport=EmailService())

    try:
        if once:
            result = await service.tick(utcnow())
            print(
                f"Checked {result.appointments_checked} appointments, "
                f"sent {result.reminders_sent} reminders"
            )
            return

        task = PeriodicTask(
            name="reminders",
            interval=settings.reminder_interval_seconds,
            work=service.tick,
        )
        task.start()
        try:
            await asyncio.Event().wait()
        finally:
            await task.stop()
    finally:
        await engine.dispose()


def main() -> int:
    """Parse arguments and run."""
    parser = argparse.ArgumentParser(description="Send queue reminder emails")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    args = parser.parse_args()

    configure_logging()
    try:
        asyncio.run(run(args.once))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
