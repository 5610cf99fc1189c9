from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ContactDetails:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class CalendarEvent:
    summary: str
    start: datetime
    end: datetime
    description: str = ""
    event_id: str | None = None
    attendee_emails: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BookingFilter:
    client_email: str
    keyword: str = "consulta"


@dataclass(frozen=True)
class BookingSummary:
    event_id: str
    description: str
    date: str
