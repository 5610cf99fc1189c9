from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from agendabot.application.ports.calendar import CalendarPort
from agendabot.domain.entities.appointment import CalendarEvent


class MockCalendar(CalendarPort):
    def __init__(self, events: list[CalendarEvent] | None = None) -> None:
        self._events: dict[str, CalendarEvent] = {}
        self._counter = 0
        self._logger = logging.getLogger(__name__)
        for event in events or []:
            self._store(event)

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime | None = None,
    ) -> list[CalendarEvent]:
        out = [
            ev
            for ev in self._events.values()
            if ev.end > time_min and (time_max is None or ev.start < time_max)
        ]
        return sorted(out, key=lambda ev: ev.start)

    def insert_event(self, calendar_id: str, event: CalendarEvent) -> str:
        event_id = self._store(event)
        self._logger.info(
            "Mock calendar event created",
            extra={"event_id": event_id, "calendar_id": calendar_id},
        )
        return event_id

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        if event_id not in self._events:
            raise KeyError(f"Unknown event {event_id}")
        del self._events[event_id]
        self._logger.info("Mock calendar event cancelled", extra={"event_id": event_id})

    def _store(self, event: CalendarEvent) -> str:
        self._counter += 1
        event_id = event.event_id or f"mock_event_{self._counter}"
        self._events[event_id] = replace(event, event_id=event_id)
        return event_id
