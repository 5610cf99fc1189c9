from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from agendabot.application.use_cases.appointment_lookup import CancellationDialogue, LookupDialogue
from agendabot.application.use_cases.availability import AvailabilityCalculator
from agendabot.application.use_cases.booking_dialogue import BookingDialogue
from agendabot.application.use_cases.calendar_gateway import CalendarGateway
from agendabot.application.use_cases.handle_fulfillment import HandleFulfillmentUseCase
from agendabot.domain.entities.availability import AvailabilityWindow
from agendabot.infrastructure.calendar.mock_calendar import MockCalendar
from agendabot.infrastructure.knowledge.canned_responses import CannedResponseStore
from agendabot.infrastructure.llm.mock_llm import MockLLM
from agendabot.infrastructure.store.memory_store import MemorySessionStore

TZ = ZoneInfo("America/Sao_Paulo")
# Monday, 13 January 2025.
FIXED_NOW = datetime(2025, 1, 13, 0, 0, tzinfo=TZ)


@pytest.fixture
def calendar() -> MockCalendar:
    return MockCalendar()


@pytest.fixture
def llm() -> MockLLM:
    return MockLLM(reply="Posso ajudar com mais alguma coisa?")


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def fulfillment(calendar, llm, session_store) -> HandleFulfillmentUseCase:
    window = AvailabilityWindow(business_hours={1: (14, 19), 2: (8, 13)}, timezone=TZ)
    gateway = CalendarGateway(calendar, TZ)
    booking = BookingDialogue(
        availability=AvailabilityCalculator(calendar),
        gateway=gateway,
        calendar_id="primary",
        window=window,
        clock=lambda: FIXED_NOW,
    )
    return HandleFulfillmentUseCase(
        booking=booking,
        lookup=LookupDialogue(gateway, "primary"),
        cancellation=CancellationDialogue(gateway, "primary"),
        knowledge_base=CannedResponseStore(),
        llm=llm,
        session_store=session_store,
        context_lifespan=5,
    )
