"""
Tests for translating bookings into calendar events and back.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from agendabot.application.exceptions import BookingFailed, CalendarUnavailable
from agendabot.application.use_cases.calendar_gateway import CalendarGateway
from agendabot.domain.entities.appointment import BookingFilter, CalendarEvent, ContactDetails
from agendabot.infrastructure.calendar.mock_calendar import MockCalendar

TZ = ZoneInfo("America/Sao_Paulo")
NOW = datetime(2025, 1, 13, 9, 0, tzinfo=TZ)
CONTACT = ContactDetails(name="João Silva", email="joao@example.com", phone="61999999999")


class BrokenCalendar(MockCalendar):
    def list_events(self, calendar_id, time_min, time_max=None):
        raise ConnectionError("unreachable")

    def insert_event(self, calendar_id, event):
        raise ConnectionError("unreachable")


def test_build_event_uses_slot_and_contact():
    gateway = CalendarGateway(MockCalendar(), TZ)

    event = gateway.build_event("14/01/2025 14:00", CONTACT)

    assert event.summary == "Consulta com João Silva"
    assert event.start == datetime(2025, 1, 14, 14, 0, tzinfo=TZ)
    assert event.end - event.start == timedelta(minutes=60)
    assert "E-mail: joao@example.com" in event.description
    assert "Telefone: 61999999999" in event.description
    assert "Data/Horário: 14/01/2025 14:00" in event.description


def test_book_slot_returns_event_id():
    calendar = MockCalendar()
    gateway = CalendarGateway(calendar, TZ, duration_minutes=30)

    event_id = gateway.book_slot("primary", "14/01/2025 14:00", CONTACT)

    events = calendar.list_events("primary", NOW)
    assert [ev.event_id for ev in events] == [event_id]
    assert events[0].end == datetime(2025, 1, 14, 14, 30, tzinfo=TZ)


def test_book_slot_failure_raises_booking_failed():
    gateway = CalendarGateway(BrokenCalendar(), TZ)

    with pytest.raises(BookingFailed):
        gateway.book_slot("primary", "14/01/2025 14:00", CONTACT)


def test_malformed_slot_raises_booking_failed():
    gateway = CalendarGateway(MockCalendar(), TZ)

    with pytest.raises(BookingFailed):
        gateway.book_slot("primary", "amanhã às 14h", CONTACT)


def test_cancel_unknown_event_raises_booking_failed():
    gateway = CalendarGateway(MockCalendar(), TZ)

    with pytest.raises(BookingFailed):
        gateway.cancel_booking("primary", "missing")


def test_list_bookings_filters_by_email_and_keyword():
    calendar = MockCalendar()
    gateway = CalendarGateway(calendar, TZ)
    later = gateway.book_slot("primary", "21/01/2025 14:00", CONTACT)
    earlier = gateway.book_slot("primary", "14/01/2025 15:00", CONTACT)
    gateway.book_slot(
        "primary",
        "14/01/2025 16:00",
        ContactDetails(name="Ana", email="ana@example.com", phone="61988887777"),
    )
    calendar.insert_event(
        "primary",
        CalendarEvent(
            summary="Reunião interna",
            description="joao@example.com",
            start=datetime(2025, 1, 15, 9, 0, tzinfo=TZ),
            end=datetime(2025, 1, 15, 10, 0, tzinfo=TZ),
        ),
    )

    bookings = gateway.list_bookings("primary", BookingFilter(client_email="joao@example.com"), now=NOW)

    assert [b.event_id for b in bookings] == [earlier, later]
    assert bookings[0].date == "14/01/2025 15:00"
    assert bookings[0].description == "Consulta com João Silva"


def test_list_bookings_matches_attendees():
    calendar = MockCalendar(
        [
            CalendarEvent(
                summary="Consulta de retorno",
                start=datetime(2025, 1, 14, 14, 0, tzinfo=TZ),
                end=datetime(2025, 1, 14, 15, 0, tzinfo=TZ),
                attendee_emails=("joao@example.com",),
            )
        ]
    )
    gateway = CalendarGateway(calendar, TZ)

    bookings = gateway.list_bookings("primary", BookingFilter(client_email="joao@example.com"), now=NOW)

    assert len(bookings) == 1


def test_list_bookings_ignores_email_case():
    calendar = MockCalendar(
        [
            CalendarEvent(
                summary="Consulta de retorno",
                start=datetime(2025, 1, 14, 14, 0, tzinfo=TZ),
                end=datetime(2025, 1, 14, 15, 0, tzinfo=TZ),
                attendee_emails=("Ana@Example.com",),
            )
        ]
    )
    gateway = CalendarGateway(calendar, TZ)
    gateway.book_slot("primary", "14/01/2025 15:00", CONTACT)

    by_description = gateway.list_bookings("primary", BookingFilter(client_email="Joao@Example.com"), now=NOW)
    by_attendee = gateway.list_bookings("primary", BookingFilter(client_email="ana@example.com"), now=NOW)

    assert [b.date for b in by_description] == ["14/01/2025 15:00"]
    assert [b.date for b in by_attendee] == ["14/01/2025 14:00"]


def test_list_bookings_failure_raises_calendar_unavailable():
    gateway = CalendarGateway(BrokenCalendar(), TZ)

    with pytest.raises(CalendarUnavailable):
        gateway.list_bookings("primary", BookingFilter(client_email="joao@example.com"), now=NOW)
