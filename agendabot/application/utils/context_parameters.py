from __future__ import annotations

from typing import Any

from agendabot.domain.entities.booking_state import (
    AwaitingConfirmation,
    AwaitingEmail,
    AwaitingName,
    AwaitingPhone,
    AwaitingSlotSelection,
    BookingSessionState,
    BookingStatus,
    Finished,
    Initial,
)
from agendabot.domain.entities.cancellation_state import CancellationState


def booking_state_to_parameters(state: BookingSessionState) -> dict[str, Any]:
    """Flatten a booking state into the context parameter bag round-tripped by the intent platform."""
    return {
        "state": state.status.value,
        "chosenSlot": getattr(state, "chosen_slot", ""),
        "clientName": getattr(state, "client_name", ""),
        "clientEmail": getattr(state, "client_email", ""),
        "clientPhone": getattr(state, "client_phone", ""),
        "availableSlots": list(getattr(state, "offered_slots", ())),
        "currentIndex": getattr(state, "page_offset", 0),
    }


def booking_state_from_parameters(parameters: dict[str, Any] | None) -> BookingSessionState:
    """
    Rebuild a booking state from a context parameter bag.

    Missing or inconsistent parameters (e.g. AWAITING_EMAIL without a chosen
    slot) fall back to ``Initial``.
    """
    params = parameters or {}
    raw_status = str(params.get("state") or BookingStatus.INITIAL.value)
    try:
        status = BookingStatus(raw_status)
    except ValueError:
        return Initial()

    slot = _text(params.get("chosenSlot"))
    name = _text(params.get("clientName"))
    email = _text(params.get("clientEmail"))
    phone = _text(params.get("clientPhone"))

    if status == BookingStatus.AWAITING_SLOT_SELECTION:
        offered = tuple(str(s) for s in (params.get("availableSlots") or []) if s)
        if not offered:
            return Initial()
        return AwaitingSlotSelection(offered_slots=offered, page_offset=_int(params.get("currentIndex")))
    if status == BookingStatus.AWAITING_NAME and slot:
        return AwaitingName(chosen_slot=slot)
    if status == BookingStatus.AWAITING_EMAIL and slot and name:
        return AwaitingEmail(chosen_slot=slot, client_name=name)
    if status == BookingStatus.AWAITING_PHONE and slot and name and email:
        return AwaitingPhone(chosen_slot=slot, client_name=name, client_email=email)
    if status == BookingStatus.AWAITING_CONFIRMATION and slot and name and email and phone:
        return AwaitingConfirmation(chosen_slot=slot, client_name=name, client_email=email, client_phone=phone)
    if status == BookingStatus.FINISHED:
        return Finished()
    return Initial()


def cancellation_state_to_parameters(state: CancellationState) -> dict[str, Any]:
    return {"state": state.status, "clientEmail": state.client_email or ""}


def cancellation_state_from_parameters(parameters: dict[str, Any] | None) -> CancellationState:
    params = parameters or {}
    return CancellationState(
        status=str(params.get("state") or "NONE"),
        client_email=_text(params.get("clientEmail")) or None,
    )


def _text(value: Any) -> str:
    return str(value).strip() if value else ""


def _int(value: Any) -> int:
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return 0
