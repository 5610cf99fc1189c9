"""
Tests for flattening booking and cancellation states into context parameters.
"""

from agendabot.application.utils.context_parameters import (
    booking_state_from_parameters,
    booking_state_to_parameters,
    cancellation_state_from_parameters,
    cancellation_state_to_parameters,
)
from agendabot.domain.entities.booking_state import (
    AwaitingConfirmation,
    AwaitingEmail,
    AwaitingName,
    AwaitingSlotSelection,
    Finished,
    Initial,
)
from agendabot.domain.entities.cancellation_state import CancellationState


def test_slot_selection_uses_wire_keys():
    state = AwaitingSlotSelection(offered_slots=("14/01/2025 14:00", "14/01/2025 15:00"), page_offset=2)

    params = booking_state_to_parameters(state)

    assert params["state"] == "AWAITING_SLOT_SELECTION"
    assert params["availableSlots"] == ["14/01/2025 14:00", "14/01/2025 15:00"]
    assert params["currentIndex"] == 2
    assert params["chosenSlot"] == ""


def test_confirmation_state_survives_round_trip():
    state = AwaitingConfirmation(
        chosen_slot="14/01/2025 14:00",
        client_name="João Silva",
        client_email="joao@example.com",
        client_phone="61999999999",
    )

    assert booking_state_from_parameters(booking_state_to_parameters(state)) == state


def test_platform_numbers_come_back_as_floats():
    params = {
        "state": "AWAITING_SLOT_SELECTION",
        "availableSlots": ["14/01/2025 14:00"],
        "currentIndex": 4.0,
    }

    state = booking_state_from_parameters(params)

    assert state == AwaitingSlotSelection(offered_slots=("14/01/2025 14:00",), page_offset=4)


def test_missing_parameters_mean_initial():
    assert booking_state_from_parameters(None) == Initial()
    assert booking_state_from_parameters({}) == Initial()
    assert booking_state_from_parameters({"state": "SOMETHING_ELSE"}) == Initial()


def test_inconsistent_parameters_fall_back_to_initial():
    assert booking_state_from_parameters({"state": "AWAITING_EMAIL", "chosenSlot": "14/01/2025 14:00"}) == Initial()
    assert booking_state_from_parameters({"state": "AWAITING_SLOT_SELECTION", "availableSlots": []}) == Initial()


def test_partial_states_are_restored():
    assert booking_state_from_parameters(
        {"state": "AWAITING_NAME", "chosenSlot": "14/01/2025 14:00"}
    ) == AwaitingName(chosen_slot="14/01/2025 14:00")
    assert booking_state_from_parameters(
        {"state": "AWAITING_EMAIL", "chosenSlot": "14/01/2025 14:00", "clientName": "Ana"}
    ) == AwaitingEmail(chosen_slot="14/01/2025 14:00", client_name="Ana")


def test_finished_state():
    assert booking_state_to_parameters(Finished(event_id="abc"))["state"] == "FINISHED"
    assert booking_state_from_parameters({"state": "FINISHED"}) == Finished()


def test_cancellation_state_round_trip():
    state = CancellationState(status="AWAITING_CANCEL_SELECTION", client_email="ana@example.com")

    params = cancellation_state_to_parameters(state)

    assert params == {"state": "AWAITING_CANCEL_SELECTION", "clientEmail": "ana@example.com"}
    assert cancellation_state_from_parameters(params) == state
    assert cancellation_state_from_parameters(None) == CancellationState()
