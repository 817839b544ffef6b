"""Shared test helpers."""

from dataclasses import dataclass
from datetime import UTC, datetime

from app.config import settings

ADMIN_HEADERS = {"X-Admin-Secret": settings.admin_secret}


@dataclass
class SentEmail:
    """An email captured by the fake transport."""

    to: str
    subject: str
    body: str


class FakeMailTransport:
    """Records emails instead of sending them."""

    def __init__(self, deliver: bool = True, error: Exception | None = None):
        self.deliver = deliver
        self.error = error
        self.sent: list[SentEmail] = []

    async def send_email(self, to: str, subject: str, body: str) -> bool:
        self.sent.append(SentEmail(to=to, subject=subject, body=body))
        if self.error is not None:
            raise self.error
        return self.deliver


def at(hour: int, minute: int, second: int = 0, day: int = 15) -> datetime:
    """A UTC time on 2025-01-<day>."""
    return datetime(2025, 1, day, hour, minute, second, tzinfo=UTC)
