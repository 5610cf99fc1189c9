from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from itertools import islice
from typing import Iterable, Iterator

from agendabot.application.exceptions import CalendarUnavailable
from agendabot.application.ports.calendar import CalendarPort
from agendabot.application.utils.retry import NO_RETRY, RetryPolicy
from agendabot.domain.entities.availability import AvailabilityWindow, BusyInterval
from agendabot.domain.entities.slot import format_slot


def iter_free_slots(
    now: datetime,
    window: AvailabilityWindow,
    busy: Iterable[BusyInterval],
) -> Iterator[str]:
    """
    Yield free slots in chronological order.

    A candidate is free when it lies in the weekly template, strictly after
    ``now``, strictly before ``now + lookahead`` and outside every busy interval
    (half-open ``start <= slot < end``). Pure function of its inputs.
    """
    tz = window.timezone
    local_now = now.astimezone(tz)
    horizon = local_now + timedelta(weeks=window.lookahead_weeks)
    step = timedelta(minutes=window.slot_granularity_minutes)
    intervals = tuple(busy)

    day = local_now.date()
    while day <= horizon.date():
        hours = window.hours_for(day.weekday())
        if hours is None:
            day += timedelta(days=1)
            continue

        start_hour, end_hour = hours
        cursor = datetime.combine(day, time(hour=start_hour), tzinfo=tz)
        day_end = datetime.combine(day, time(), tzinfo=tz) + timedelta(hours=end_hour)
        while cursor < day_end:
            if local_now < cursor < horizon and not any(b.blocks(cursor) for b in intervals):
                yield format_slot(cursor, tz)
            cursor += step

        day += timedelta(days=1)


class AvailabilityCalculator:
    def __init__(self, calendar: CalendarPort, retry_policy: RetryPolicy = NO_RETRY) -> None:
        self._calendar = calendar
        self._retry = retry_policy
        self._logger = logging.getLogger(__name__)

    def fetch_busy_intervals(self, calendar_id: str, start: datetime, end: datetime) -> list[BusyInterval]:
        try:
            events = self._retry.call(self._calendar.list_events, calendar_id, start, end)
        except CalendarUnavailable:
            raise
        except Exception as e:
            self._logger.error(
                "Error listing busy intervals",
                extra={"calendar_id": calendar_id, "error": str(e)},
            )
            raise CalendarUnavailable(f"Could not read calendar {calendar_id}: {e}") from e
        return [BusyInterval(start=ev.start, end=ev.end) for ev in events]

    def compute_free_slots(
        self,
        calendar_id: str,
        now: datetime,
        window: AvailabilityWindow,
    ) -> Iterator[str]:
        end = now + timedelta(weeks=window.lookahead_weeks)
        busy = self.fetch_busy_intervals(calendar_id, now, end)
        return iter_free_slots(now, window, busy)

    def page_free_slots(
        self,
        calendar_id: str,
        now: datetime,
        window: AvailabilityWindow,
        offset: int,
        size: int,
    ) -> list[str]:
        slots = self.compute_free_slots(calendar_id, now, window)
        return list(islice(slots, max(0, offset), max(0, offset) + size))
