from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from agendabot.application.exceptions import BookingFailed, CalendarUnavailable
from agendabot.application.ports.calendar import CalendarPort
from agendabot.core.config import settings
from agendabot.domain.entities.appointment import CalendarEvent
from agendabot.infrastructure.google.credentials import GoogleTokenProvider


class GoogleCalendar(CalendarPort):
    def __init__(
        self,
        token_provider: GoogleTokenProvider,
        base_url: str | None = None,
        timezone: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._tokens = token_provider
        self._base_url = (base_url or settings.GOOGLE_CALENDAR_BASE_URL).rstrip("/")
        self._timezone = timezone or settings.BUSINESS_TIMEZONE
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime | None = None,
    ) -> list[CalendarEvent]:
        url = self._events_url(calendar_id)
        params: dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        if time_max is not None:
            params["timeMax"] = time_max.isoformat()

        events: list[CalendarEvent] = []
        try:
            while True:
                response = self._client.get(url, params=params, headers=self._tokens.auth_headers())
                response.raise_for_status()
                data = response.json()
                for item in data.get("items", []) or []:
                    event = _to_event(item)
                    if event is not None:
                        events.append(event)
                page_token = data.get("nextPageToken")
                if not page_token:
                    break
                params["pageToken"] = page_token
        except httpx.HTTPError as e:
            self._logger.error("Error listing calendar events", extra={"calendar_id": calendar_id, "error": str(e)})
            raise CalendarUnavailable(str(e)) from e

        return events

    def insert_event(self, calendar_id: str, event: CalendarEvent) -> str:
        payload = {
            "summary": event.summary,
            "description": event.description,
            "start": {"dateTime": event.start.isoformat(), "timeZone": self._timezone},
            "end": {"dateTime": event.end.isoformat(), "timeZone": self._timezone},
        }
        try:
            response = self._client.post(
                self._events_url(calendar_id),
                json=payload,
                headers=self._tokens.auth_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Error creating calendar event", extra={"calendar_id": calendar_id, "error": str(e)})
            raise BookingFailed(str(e)) from e

        event_id = response.json().get("id")
        if not event_id:
            raise BookingFailed("No event ID returned from Google Calendar API")

        self._logger.info("Calendar event created", extra={"calendar_id": calendar_id, "event_id": event_id})
        return str(event_id)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            response = self._client.delete(
                f"{self._events_url(calendar_id)}/{quote(event_id, safe='')}",
                headers=self._tokens.auth_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error(
                "Error removing calendar event",
                extra={"calendar_id": calendar_id, "event_id": event_id, "error": str(e)},
            )
            raise BookingFailed(str(e)) from e

        self._logger.info("Calendar event deleted", extra={"calendar_id": calendar_id, "event_id": event_id})

    def _events_url(self, calendar_id: str) -> str:
        return f"{self._base_url}/calendars/{quote(calendar_id, safe='')}/events"


def _to_event(item: dict[str, Any]) -> CalendarEvent | None:
    # All-day events carry only "date" and do not block hourly slots.
    start_raw = (item.get("start") or {}).get("dateTime")
    end_raw = (item.get("end") or {}).get("dateTime")
    if not start_raw or not end_raw or item.get("status") == "cancelled":
        return None
    try:
        start = datetime.fromisoformat(start_raw.replace("Z", "+00:00"))
        end = datetime.fromisoformat(end_raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    attendees = tuple(
        str(a.get("email")) for a in (item.get("attendees") or []) if isinstance(a, dict) and a.get("email")
    )
    return CalendarEvent(
        summary=item.get("summary") or "",
        description=item.get("description") or "",
        start=start,
        end=end,
        event_id=item.get("id"),
        attendee_emails=attendees,
    )
