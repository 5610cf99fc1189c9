from __future__ import annotations

import logging
from dataclasses import dataclass

from agendabot.application.exceptions import ValidationError
from agendabot.application.use_cases.calendar_gateway import CalendarGateway
from agendabot.application.utils import input_parsing
from agendabot.domain.entities.appointment import BookingFilter, BookingSummary
from agendabot.domain.entities.cancellation_state import CancellationState

ASK_EMAIL_LOOKUP_TEXT = "Certo! Para consultar suas consultas marcadas, por favor informe o seu e-mail."
INVALID_EMAIL_LOOKUP_TEXT = (
    "Por favor, informe um e-mail válido no formato correto. Exemplo: exemplo@dominio.com."
)
ASK_EMAIL_CANCEL_TEXT = (
    "Por favor, informe o seu e-mail para que eu possa verificar suas consultas marcadas."
)
INVALID_EMAIL_CANCEL_TEXT = (
    "O e-mail fornecido não parece ser válido. "
    "Por favor, envie novamente no formato correto (exemplo@dominio.com)."
)
NO_BOOKINGS_TEXT = "Você não possui consultas marcadas no momento."
NOT_UNDERSTOOD_TEXT = "Desculpe, não entendi sua solicitação."

AWAITING_EMAIL_FOR_CANCEL = "AWAITING_EMAIL_FOR_CANCEL"
AWAITING_CANCEL_SELECTION = "AWAITING_CANCEL_SELECTION"
FINISHED = "FINISHED"


@dataclass(frozen=True)
class LookupTurn:
    text: str
    client_email: str | None = None


@dataclass(frozen=True)
class CancellationTurn:
    text: str
    state: CancellationState


class LookupDialogue:
    """Lists the upcoming appointments booked under an email address."""

    def __init__(self, gateway: CalendarGateway, calendar_id: str) -> None:
        self._gateway = gateway
        self._calendar_id = calendar_id

    def start(self) -> LookupTurn:
        return LookupTurn(ASK_EMAIL_LOOKUP_TEXT)

    def lookup(self, utterance: str) -> LookupTurn:
        try:
            email = input_parsing.parse_email(utterance)
        except ValidationError:
            return LookupTurn(INVALID_EMAIL_LOOKUP_TEXT)

        bookings = self._gateway.list_bookings(self._calendar_id, BookingFilter(client_email=email))
        if not bookings:
            return LookupTurn(f"Não encontramos consultas marcadas para o e-mail {email}.", client_email=email)
        return LookupTurn(
            f"Consultas marcadas para o e-mail {email}:\n{_enumerate(bookings)}",
            client_email=email,
        )


class CancellationDialogue:
    def __init__(self, gateway: CalendarGateway, calendar_id: str) -> None:
        self._gateway = gateway
        self._calendar_id = calendar_id
        self._logger = logging.getLogger(__name__)

    def start(self, known_email: str | None) -> CancellationTurn:
        if not known_email:
            return CancellationTurn(ASK_EMAIL_CANCEL_TEXT, CancellationState(status=AWAITING_EMAIL_FOR_CANCEL))
        return self._offer_bookings(known_email, empty_text=NO_BOOKINGS_TEXT)

    def receive_email(self, state: CancellationState, utterance: str) -> CancellationTurn:
        try:
            email = input_parsing.parse_email(utterance)
        except ValidationError:
            return CancellationTurn(INVALID_EMAIL_CANCEL_TEXT, state)
        return self._offer_bookings(
            email,
            empty_text=f"Não encontramos consultas marcadas para o e-mail {email}.",
        )

    def select(self, state: CancellationState, utterance: str) -> CancellationTurn:
        if state.status != AWAITING_CANCEL_SELECTION or not state.client_email:
            return CancellationTurn(NOT_UNDERSTOOD_TEXT, state)

        bookings = self._gateway.list_bookings(
            self._calendar_id, BookingFilter(client_email=state.client_email)
        )
        try:
            choice = input_parsing.parse_choice(utterance)
        except ValidationError:
            choice = 0

        if not bookings:
            return CancellationTurn(
                NO_BOOKINGS_TEXT, CancellationState(status=FINISHED, client_email=state.client_email)
            )
        if not 1 <= choice <= len(bookings):
            return CancellationTurn(
                f"Número inválido. Por favor, escolha um número de 1 a {len(bookings)}.",
                state,
            )

        selected = bookings[choice - 1]
        self._gateway.cancel_booking(self._calendar_id, selected.event_id)
        self._logger.info("Appointment cancelled by user", extra={"event_id": selected.event_id})
        return CancellationTurn(
            f'A consulta "{selected.description}" marcada para {selected.date} foi desmarcada com sucesso.',
            CancellationState(status=FINISHED, client_email=state.client_email),
        )

    def _offer_bookings(self, email: str, empty_text: str) -> CancellationTurn:
        bookings = self._gateway.list_bookings(self._calendar_id, BookingFilter(client_email=email))
        if not bookings:
            return CancellationTurn(empty_text, CancellationState(status=FINISHED, client_email=email))
        return CancellationTurn(
            "Selecione a consulta que deseja desmarcar:\n"
            f"{_enumerate(bookings)}\n\nResponda com o número correspondente.",
            CancellationState(status=AWAITING_CANCEL_SELECTION, client_email=email),
        )


def _enumerate(bookings: list[BookingSummary]) -> str:
    return "\n".join(f"{i} - {b.description} ({b.date})" for i, b in enumerate(bookings, 1))
