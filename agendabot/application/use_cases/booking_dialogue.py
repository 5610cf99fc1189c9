from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from agendabot.application.exceptions import ValidationError
from agendabot.application.use_cases.availability import AvailabilityCalculator
from agendabot.application.use_cases.calendar_gateway import CalendarGateway
from agendabot.application.utils import input_parsing
from agendabot.domain.entities.appointment import ContactDetails
from agendabot.domain.entities.availability import AvailabilityWindow
from agendabot.domain.entities.booking_state import (
    AwaitingConfirmation,
    AwaitingEmail,
    AwaitingName,
    AwaitingPhone,
    AwaitingSlotSelection,
    BookingSessionState,
    Finished,
    Initial,
)

NO_SLOTS_TEXT = "Não há horários disponíveis no momento. Por favor, tente novamente mais tarde."
NO_MORE_SLOTS_TEXT = "Não há mais horários disponíveis."
ASK_NAME_TEXT = "Ótimo! Agora, por favor, informe o seu nome completo."
INVALID_OPTION_TEXT = "Opção inválida. Por favor, escolha um número válido."
ASK_PHONE_TEXT = "Agora, informe seu número de telefone, por favor."
BOOKED_TEXT = "Sua consulta foi marcada com sucesso!"
DECLINED_TEXT = "Consulta cancelada. Caso deseje marcar novamente, diga 'Quero marcar uma consulta'."
ABORTED_TEXT = "Agendamento cancelado. Caso deseje marcar novamente, diga 'Quero marcar uma consulta'."
CONFIRM_REPROMPT_TEXT = "Por favor, responda apenas com 'Sim' para confirmar ou 'Não' para cancelar."
RESTART_HINT_TEXT = "Seu atendimento foi encerrado. Caso deseje marcar uma consulta, diga 'Quero marcar uma consulta'."


@dataclass(frozen=True)
class DialogueTurn:
    text: str
    state: BookingSessionState


class BookingDialogue:
    """
    Multi-turn appointment booking: slot selection, contact collection, confirmation.

    Each call to ``advance`` consumes one utterance and returns the reply plus the
    next state. Invalid input never mutates the state.
    """

    def __init__(
        self,
        availability: AvailabilityCalculator,
        gateway: CalendarGateway,
        calendar_id: str,
        window: AvailabilityWindow,
        page_size: int = 4,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._availability = availability
        self._gateway = gateway
        self._calendar_id = calendar_id
        self._window = window
        self._page_size = page_size
        self._clock = clock or (lambda: datetime.now(window.timezone))
        self._logger = logging.getLogger(__name__)

    def advance(
        self,
        state: BookingSessionState,
        utterance: str,
        now: datetime | None = None,
    ) -> DialogueTurn:
        utterance = utterance or ""
        now = now or self._clock()

        if isinstance(state, Initial):
            return self._offer_first_page(now)
        if isinstance(state, Finished):
            return DialogueTurn(RESTART_HINT_TEXT, state)

        if input_parsing.is_cancel_request(utterance):
            self._logger.info("Booking aborted by user", extra={"state": state.status.value})
            return DialogueTurn(ABORTED_TEXT, Finished())

        if isinstance(state, AwaitingSlotSelection):
            return self._select_slot(state, utterance, now)
        if isinstance(state, AwaitingName):
            return self._collect_name(state, utterance)
        if isinstance(state, AwaitingEmail):
            return self._collect_email(state, utterance)
        if isinstance(state, AwaitingPhone):
            return self._collect_phone(state, utterance)
        if isinstance(state, AwaitingConfirmation):
            return self._confirm(state, utterance)

        raise TypeError(f"Unknown booking state: {state!r}")

    def _offer_first_page(self, now: datetime) -> DialogueTurn:
        slots = self._availability.page_free_slots(self._calendar_id, now, self._window, 0, self._page_size)
        if not slots:
            return DialogueTurn(NO_SLOTS_TEXT, Finished())

        text = (
            f"Os horários disponíveis são:\n{_enumerate(slots)}\n\n"
            "Por favor, responda com o número do horário desejado. "
            "Caso queira consultar mais horários, responda com 0."
        )
        return DialogueTurn(text, AwaitingSlotSelection(offered_slots=tuple(slots), page_offset=len(slots)))

    def _select_slot(self, state: AwaitingSlotSelection, utterance: str, now: datetime) -> DialogueTurn:
        try:
            choice = input_parsing.parse_choice(utterance)
        except ValidationError:
            return DialogueTurn(self._choice_reprompt(), state)

        if choice > self._page_size:
            return DialogueTurn(self._choice_reprompt(), state)

        if choice == 0:
            slots = self._availability.page_free_slots(
                self._calendar_id, now, self._window, state.page_offset, self._page_size
            )
            if not slots:
                return DialogueTurn(NO_MORE_SLOTS_TEXT, state)
            text = (
                f"Os próximos horários disponíveis são:\n{_enumerate(slots)}\n\n"
                "Por favor, responda com o número do horário desejado ou 0 para consultar mais horários."
            )
            return DialogueTurn(
                text,
                AwaitingSlotSelection(offered_slots=tuple(slots), page_offset=state.page_offset + len(slots)),
            )

        if choice - 1 >= len(state.offered_slots):
            return DialogueTurn(INVALID_OPTION_TEXT, state)

        chosen = state.offered_slots[choice - 1]
        self._logger.info("Slot chosen", extra={"state": state.status.value, "slot": chosen})
        return DialogueTurn(ASK_NAME_TEXT, AwaitingName(chosen_slot=chosen))

    def _collect_name(self, state: AwaitingName, utterance: str) -> DialogueTurn:
        try:
            name = input_parsing.parse_name(utterance)
        except ValidationError as e:
            return DialogueTurn(_reprompt("um nome válido", e), state)
        return DialogueTurn(
            f"Obrigada, {name}. Agora, informe o seu e-mail.",
            AwaitingEmail(chosen_slot=state.chosen_slot, client_name=name),
        )

    def _collect_email(self, state: AwaitingEmail, utterance: str) -> DialogueTurn:
        try:
            email = input_parsing.parse_email(utterance)
        except ValidationError as e:
            return DialogueTurn(_reprompt("um e-mail válido", e), state)
        return DialogueTurn(
            ASK_PHONE_TEXT,
            AwaitingPhone(chosen_slot=state.chosen_slot, client_name=state.client_name, client_email=email),
        )

    def _collect_phone(self, state: AwaitingPhone, utterance: str) -> DialogueTurn:
        try:
            phone = input_parsing.parse_phone(utterance)
        except ValidationError as e:
            return DialogueTurn(_reprompt("um número de telefone válido", e), state)
        text = (
            "Por favor, confirme os dados:\n"
            f"Nome: {state.client_name}\n"
            f"E-mail: {state.client_email}\n"
            f"Telefone: {phone}\n"
            f"Data/Horário: {state.chosen_slot}\n\n"
            "Confirma? (sim/não)"
        )
        return DialogueTurn(
            text,
            AwaitingConfirmation(
                chosen_slot=state.chosen_slot,
                client_name=state.client_name,
                client_email=state.client_email,
                client_phone=phone,
            ),
        )

    def _confirm(self, state: AwaitingConfirmation, utterance: str) -> DialogueTurn:
        if input_parsing.is_yes(utterance):
            # BookingFailed propagates; the caller answers with a generic apology.
            event_id = self._gateway.book_slot(
                self._calendar_id,
                state.chosen_slot,
                ContactDetails(name=state.client_name, email=state.client_email, phone=state.client_phone),
            )
            return DialogueTurn(BOOKED_TEXT, Finished(event_id=event_id))
        if input_parsing.is_no(utterance):
            return DialogueTurn(DECLINED_TEXT, Finished())
        return DialogueTurn(CONFIRM_REPROMPT_TEXT, state)

    def _choice_reprompt(self) -> str:
        return f"Por favor, responda com um número de 1 a {self._page_size} ou 0 para mais horários."


def _enumerate(slots: list[str]) -> str:
    return "\n".join(f"{i} - {slot}" for i, slot in enumerate(slots, 1))


def _reprompt(what: str, error: ValidationError) -> str:
    if error.example:
        return f"Por favor, informe {what}. Exemplo: '{error.example}'."
    return f"Por favor, informe {what}."
