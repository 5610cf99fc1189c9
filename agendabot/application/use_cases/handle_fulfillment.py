from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from agendabot.application.ports.knowledge_base import KnowledgeBasePort
from agendabot.application.ports.llm import LLMPort
from agendabot.application.ports.session_store import SessionStorePort
from agendabot.application.use_cases.appointment_lookup import CancellationDialogue, LookupDialogue
from agendabot.application.use_cases.booking_dialogue import BookingDialogue
from agendabot.application.utils.context_parameters import (
    booking_state_from_parameters,
    booking_state_to_parameters,
    cancellation_state_from_parameters,
    cancellation_state_to_parameters,
)
from agendabot.domain.entities.booking_state import BookingStatus, Finished, Initial
from agendabot.domain.entities.channel_session import ChannelSession
from agendabot.domain.entities.intent import OutputContext

BOOKING_CONTEXT = "marcar_consulta_flow"
LOOKUP_CONTEXT = "consultar_consulta_marcada_flow"
CANCEL_CONTEXT = "desmarcar_consulta_flow"

BOOKING_START_INTENT = "Marcar Consulta (Início)"
BOOKING_INTENTS = ("Marcar Consulta", "Marcar Consulta (Aguardando E-mail)")
LOOKUP_START_INTENT = "Consultar Consultas Marcadas (Início)"
LOOKUP_EMAIL_INTENT = "Consultar Consultas Marcadas (Aguardando E-mail)"
CANCEL_START_INTENT = "Desmarcar Consultas"
CANCEL_EMAIL_INTENT = "Desmarcar Consultas (Aguardando E-mail)"
CANCEL_SELECTION_INTENT = "Desmarcar Consultas - Seleção"

NOT_UNDERSTOOD_TEXT = "Desculpe, não entendi sua solicitação."


@dataclass(frozen=True)
class FulfillmentResult:
    text: str
    output_contexts: list[OutputContext] = field(default_factory=list)


class HandleFulfillmentUseCase:
    """Computes the reply text and output contexts for a recognized intent."""

    def __init__(
        self,
        booking: BookingDialogue,
        lookup: LookupDialogue,
        cancellation: CancellationDialogue,
        knowledge_base: KnowledgeBasePort,
        llm: LLMPort,
        session_store: SessionStorePort,
        context_lifespan: int = 5,
    ) -> None:
        self._booking = booking
        self._lookup = lookup
        self._cancellation = cancellation
        self._kb = knowledge_base
        self._llm = llm
        self._sessions = session_store
        self._lifespan = context_lifespan
        self._logger = logging.getLogger(__name__)

    def handle(
        self,
        intent_name: str,
        query_text: str,
        session_path: str,
        contexts: list[OutputContext],
        sender_id: str | None = None,
    ) -> FulfillmentResult:
        session_id = session_path.rsplit("/", 1)[-1]
        self._logger.info("Fulfillment received", extra={"intent": intent_name, "session_id": session_id})

        if intent_name == BOOKING_START_INTENT or intent_name in BOOKING_INTENTS:
            return self._handle_booking(intent_name, query_text, session_path, contexts)
        if intent_name in (LOOKUP_START_INTENT, LOOKUP_EMAIL_INTENT):
            return self._handle_lookup(intent_name, query_text, session_path)
        if intent_name in (CANCEL_START_INTENT, CANCEL_EMAIL_INTENT, CANCEL_SELECTION_INTENT):
            return self._handle_cancellation(intent_name, query_text, session_path, contexts)

        canned = self._kb.get_response(intent_name)
        if canned is not None:
            return FulfillmentResult(text=canned)

        return self._fallback(query_text, sender_id)

    def _handle_booking(
        self,
        intent_name: str,
        query_text: str,
        session_path: str,
        contexts: list[OutputContext],
    ) -> FulfillmentResult:
        state = booking_state_from_parameters(_parameters(contexts, BOOKING_CONTEXT))
        if intent_name == BOOKING_START_INTENT and isinstance(state, Finished):
            state = Initial()
        if intent_name != BOOKING_START_INTENT and isinstance(state, Initial):
            # Continuation intent without an active flow.
            return FulfillmentResult(
                text=NOT_UNDERSTOOD_TEXT,
                output_contexts=[self._context(session_path, BOOKING_CONTEXT, booking_state_to_parameters(state), False)],
            )

        turn = self._booking.advance(state, query_text)
        self._logger.info(
            "Booking dialogue advanced",
            extra={"intent": intent_name, "state": turn.state.status.value},
        )
        finished = turn.state.status == BookingStatus.FINISHED
        return FulfillmentResult(
            text=turn.text,
            output_contexts=[
                self._context(session_path, BOOKING_CONTEXT, booking_state_to_parameters(turn.state), finished)
            ],
        )

    def _handle_lookup(self, intent_name: str, query_text: str, session_path: str) -> FulfillmentResult:
        if intent_name == LOOKUP_START_INTENT:
            turn = self._lookup.start()
            params = {"state": "AWAITING_EMAIL", "clientEmail": ""}
        else:
            turn = self._lookup.lookup(query_text)
            params = {
                "state": "LISTED" if turn.client_email else "AWAITING_EMAIL",
                "clientEmail": turn.client_email or "",
            }
        return FulfillmentResult(
            text=turn.text,
            output_contexts=[self._context(session_path, LOOKUP_CONTEXT, params, False)],
        )

    def _handle_cancellation(
        self,
        intent_name: str,
        query_text: str,
        session_path: str,
        contexts: list[OutputContext],
    ) -> FulfillmentResult:
        state = cancellation_state_from_parameters(_parameters(contexts, CANCEL_CONTEXT))

        if intent_name == CANCEL_START_INTENT:
            known_email = (_parameters(contexts, LOOKUP_CONTEXT) or {}).get("clientEmail") or None
            turn = self._cancellation.start(known_email)
        elif intent_name == CANCEL_EMAIL_INTENT:
            turn = self._cancellation.receive_email(state, query_text)
        else:
            turn = self._cancellation.select(state, query_text)

        return FulfillmentResult(
            text=turn.text,
            output_contexts=[
                self._context(
                    session_path,
                    CANCEL_CONTEXT,
                    cancellation_state_to_parameters(turn.state),
                    turn.state.status == "FINISHED",
                )
            ],
        )

    def _fallback(self, query_text: str, sender_id: str | None) -> FulfillmentResult:
        self._logger.info("Unmapped intent, using LLM fallback")
        text = self._llm.complete(query_text.strip())

        if sender_id:
            session = self._sessions.get(sender_id)
            if session is not None:
                self._sessions.put(sender_id, ChannelSession(session_id=session.session_id))
        return FulfillmentResult(text=text, output_contexts=[])

    def _context(
        self,
        session_path: str,
        short_name: str,
        parameters: dict[str, Any],
        finished: bool,
    ) -> OutputContext:
        return OutputContext(
            name=f"{session_path}/contexts/{short_name}",
            lifespan_count=0 if finished else self._lifespan,
            parameters=parameters,
        )


def _parameters(contexts: list[OutputContext], short_name: str) -> dict[str, Any] | None:
    for ctx in contexts:
        if ctx.short_name == short_name:
            return ctx.parameters
    return None
