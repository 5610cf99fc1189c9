from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from agendabot.domain.entities.appointment import CalendarEvent


class CalendarPort(ABC):
    @abstractmethod
    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime | None = None,
    ) -> list[CalendarEvent]:
        """List single (expanded) timed events overlapping the range, ordered by start."""
        raise NotImplementedError

    @abstractmethod
    def insert_event(self, calendar_id: str, event: CalendarEvent) -> str:
        """Create calendar event. Returns event_id."""
        raise NotImplementedError

    @abstractmethod
    def delete_event(self, calendar_id: str, event_id: str) -> None:
        raise NotImplementedError
