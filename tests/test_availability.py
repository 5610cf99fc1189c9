"""
Tests for free-slot computation over the weekly business-hours template.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from agendabot.application.exceptions import CalendarUnavailable
from agendabot.application.use_cases.availability import AvailabilityCalculator, iter_free_slots
from agendabot.application.utils.retry import RetryPolicy
from agendabot.domain.entities.appointment import CalendarEvent
from agendabot.domain.entities.availability import AvailabilityWindow, BusyInterval
from agendabot.domain.entities.slot import parse_slot
from agendabot.infrastructure.calendar.mock_calendar import MockCalendar

TZ = ZoneInfo("America/Sao_Paulo")
TUESDAY_ONLY = AvailabilityWindow(business_hours={1: (14, 19)}, timezone=TZ)
DEFAULT_WINDOW = AvailabilityWindow(business_hours={1: (14, 19), 2: (8, 13)}, timezone=TZ)

# 2025-01-13 is a Monday.
MONDAY_MIDNIGHT = datetime(2025, 1, 13, 0, 0, tzinfo=TZ)


class FailingCalendar(MockCalendar):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def list_events(self, calendar_id, time_min, time_max=None):
        self.calls += 1
        raise ConnectionError("calendar down")


def test_first_slot_is_tuesday_afternoon_when_calendar_is_empty():
    slots = list(iter_free_slots(MONDAY_MIDNIGHT, TUESDAY_ONLY, []))

    assert slots[0] == "14/01/2025 14:00"
    assert slots[:5] == [
        "14/01/2025 14:00",
        "14/01/2025 15:00",
        "14/01/2025 16:00",
        "14/01/2025 17:00",
        "14/01/2025 18:00",
    ]


def test_busy_interval_pushes_first_slot_forward():
    busy = [
        BusyInterval(
            start=datetime(2025, 1, 14, 14, 0, tzinfo=TZ),
            end=datetime(2025, 1, 14, 15, 0, tzinfo=TZ),
        )
    ]

    slots = list(iter_free_slots(MONDAY_MIDNIGHT, TUESDAY_ONLY, busy))

    assert slots[0] == "14/01/2025 15:00"


def test_busy_interval_end_is_exclusive():
    busy = [
        BusyInterval(
            start=datetime(2025, 1, 14, 15, 0, tzinfo=TZ),
            end=datetime(2025, 1, 14, 16, 0, tzinfo=TZ),
        )
    ]

    slots = list(iter_free_slots(MONDAY_MIDNIGHT, TUESDAY_ONLY, busy))

    assert "14/01/2025 15:00" not in slots
    assert "14/01/2025 16:00" in slots
    assert "14/01/2025 14:00" in slots


def test_busy_interval_in_another_offset_is_compared_as_instant():
    # 17:00 UTC is 14:00 in Sao Paulo.
    busy = [
        BusyInterval(
            start=datetime(2025, 1, 14, 17, 0, tzinfo=ZoneInfo("UTC")),
            end=datetime(2025, 1, 14, 18, 0, tzinfo=ZoneInfo("UTC")),
        )
    ]

    slots = list(iter_free_slots(MONDAY_MIDNIGHT, TUESDAY_ONLY, busy))

    assert slots[0] == "14/01/2025 15:00"


def test_every_slot_is_inside_template_and_after_now():
    now = datetime(2025, 1, 14, 16, 30, tzinfo=TZ)
    busy = [
        BusyInterval(
            start=datetime(2025, 1, 15, 9, 0, tzinfo=TZ),
            end=datetime(2025, 1, 15, 11, 0, tzinfo=TZ),
        )
    ]

    slots = list(iter_free_slots(now, DEFAULT_WINDOW, busy))

    assert slots
    for slot in slots:
        moment = parse_slot(slot, TZ)
        start_hour, end_hour = DEFAULT_WINDOW.business_hours[moment.weekday()]
        assert start_hour <= moment.hour < end_hour
        assert moment > now
        assert moment < now + timedelta(weeks=2)
        assert not any(b.blocks(moment) for b in busy)


def test_slots_on_current_day_before_now_are_excluded():
    now = datetime(2025, 1, 14, 16, 0, tzinfo=TZ)

    slots = list(iter_free_slots(now, TUESDAY_ONLY, []))

    # 16:00 itself is not strictly after now.
    assert slots[0] == "14/01/2025 17:00"


def test_days_outside_template_yield_nothing():
    slots = list(iter_free_slots(MONDAY_MIDNIGHT, DEFAULT_WINDOW, []))

    weekdays = {parse_slot(slot, TZ).weekday() for slot in slots}
    assert weekdays == {1, 2}
    assert len(slots) == 2 * (5 + 5)


def test_slots_are_chronological():
    slots = list(iter_free_slots(MONDAY_MIDNIGHT, DEFAULT_WINDOW, []))

    moments = [parse_slot(slot, TZ) for slot in slots]
    assert moments == sorted(moments)


def test_horizon_is_strict():
    # Exactly two weeks later is Tuesday 14:00 and must not be offered.
    now = datetime(2025, 1, 14, 14, 0, tzinfo=TZ)

    slots = list(iter_free_slots(now, TUESDAY_ONLY, []))

    assert "28/01/2025 14:00" not in slots
    assert slots[-1] == "21/01/2025 18:00"


def test_compute_free_slots_is_idempotent():
    calendar = MockCalendar(
        [
            CalendarEvent(
                summary="Consulta com Maria",
                start=datetime(2025, 1, 14, 14, 0, tzinfo=TZ),
                end=datetime(2025, 1, 14, 15, 0, tzinfo=TZ),
            )
        ]
    )
    calculator = AvailabilityCalculator(calendar)

    first = list(calculator.compute_free_slots("primary", MONDAY_MIDNIGHT, DEFAULT_WINDOW))
    second = list(calculator.compute_free_slots("primary", MONDAY_MIDNIGHT, DEFAULT_WINDOW))

    assert first == second
    assert first[0] == "14/01/2025 15:00"


def test_page_free_slots_returns_requested_window():
    calculator = AvailabilityCalculator(MockCalendar())

    first_page = calculator.page_free_slots("primary", MONDAY_MIDNIGHT, TUESDAY_ONLY, 0, 4)
    second_page = calculator.page_free_slots("primary", MONDAY_MIDNIGHT, TUESDAY_ONLY, 4, 4)

    assert first_page == ["14/01/2025 14:00", "14/01/2025 15:00", "14/01/2025 16:00", "14/01/2025 17:00"]
    assert second_page == ["14/01/2025 18:00", "21/01/2025 14:00", "21/01/2025 15:00", "21/01/2025 16:00"]


def test_calendar_failure_raises_calendar_unavailable():
    calendar = FailingCalendar()
    calculator = AvailabilityCalculator(calendar)

    with pytest.raises(CalendarUnavailable):
        list(calculator.compute_free_slots("primary", MONDAY_MIDNIGHT, DEFAULT_WINDOW))
    assert calendar.calls == 1


def test_calendar_failure_is_retried_by_policy():
    calendar = FailingCalendar()
    policy = RetryPolicy(max_attempts=3, backoff_seconds=0.1, sleep=lambda _: None)
    calculator = AvailabilityCalculator(calendar, retry_policy=policy)

    with pytest.raises(CalendarUnavailable):
        calculator.fetch_busy_intervals("primary", MONDAY_MIDNIGHT, MONDAY_MIDNIGHT + timedelta(weeks=2))
    assert calendar.calls == 3
