from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from agendabot.application.exceptions import BookingFailed, CalendarUnavailable
from agendabot.application.ports.calendar import CalendarPort
from agendabot.application.utils.retry import NO_RETRY, RetryPolicy
from agendabot.domain.entities.appointment import (
    BookingFilter,
    BookingSummary,
    CalendarEvent,
    ContactDetails,
)
from agendabot.domain.entities.slot import format_slot, parse_slot


class CalendarGateway:
    """Translates confirmed slots and contact data into calendar mutations."""

    def __init__(
        self,
        calendar: CalendarPort,
        timezone: ZoneInfo,
        duration_minutes: int = 60,
        retry_policy: RetryPolicy = NO_RETRY,
    ) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._duration = timedelta(minutes=duration_minutes)
        self._retry = retry_policy
        self._logger = logging.getLogger(__name__)

    def build_event(self, slot: str, contact: ContactDetails) -> CalendarEvent:
        start = parse_slot(slot, self._timezone)
        return CalendarEvent(
            summary=f"Consulta com {contact.name}",
            description=(
                "Detalhes:\n"
                f"Nome: {contact.name}\n"
                f"E-mail: {contact.email}\n"
                f"Telefone: {contact.phone}\n"
                f"Data/Horário: {slot}"
            ),
            start=start,
            end=start + self._duration,
        )

    def book_slot(self, calendar_id: str, slot: str, contact: ContactDetails) -> str:
        try:
            event = self.build_event(slot, contact)
        except ValueError as e:
            raise BookingFailed(f"Invalid slot {slot!r}") from e

        try:
            event_id = self._retry.call(self._calendar.insert_event, calendar_id, event)
        except Exception as e:
            self._logger.error(
                "Error creating calendar event",
                extra={"calendar_id": calendar_id, "error": str(e)},
            )
            raise BookingFailed(str(e)) from e

        self._logger.info("Booking created", extra={"calendar_id": calendar_id, "event_id": event_id})
        return event_id

    def cancel_booking(self, calendar_id: str, event_id: str) -> None:
        try:
            self._retry.call(self._calendar.delete_event, calendar_id, event_id)
        except Exception as e:
            self._logger.error(
                "Error removing calendar event",
                extra={"calendar_id": calendar_id, "event_id": event_id, "error": str(e)},
            )
            raise BookingFailed(str(e)) from e

        self._logger.info("Booking cancelled", extra={"calendar_id": calendar_id, "event_id": event_id})

    def list_bookings(
        self,
        calendar_id: str,
        booking_filter: BookingFilter,
        now: datetime | None = None,
    ) -> list[BookingSummary]:
        now = now or datetime.now(self._timezone)
        try:
            events = self._retry.call(self._calendar.list_events, calendar_id, now, None)
        except Exception as e:
            self._logger.error(
                "Error listing bookings",
                extra={"calendar_id": calendar_id, "error": str(e)},
            )
            raise CalendarUnavailable(str(e)) from e

        keyword = booking_filter.keyword.lower()
        email = booking_filter.client_email.lower()
        out: list[BookingSummary] = []
        for event in sorted(events, key=lambda ev: ev.start):
            mentions_keyword = keyword in event.summary.lower() or keyword in event.description.lower()
            mentions_client = email in event.description.lower() or any(
                email == attendee.lower() for attendee in event.attendee_emails
            )
            if not (mentions_keyword and mentions_client) or not event.event_id:
                continue
            out.append(
                BookingSummary(
                    event_id=event.event_id,
                    description=event.summary or "Consulta sem descrição",
                    date=format_slot(event.start, self._timezone),
                )
            )
        return out
