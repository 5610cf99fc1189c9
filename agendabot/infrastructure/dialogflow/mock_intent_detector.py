from __future__ import annotations

import logging
import re

from agendabot.application.ports.intent_detection import IntentDetectionPort
from agendabot.application.use_cases.handle_fulfillment import (
    BOOKING_CONTEXT,
    BOOKING_INTENTS,
    BOOKING_START_INTENT,
    HandleFulfillmentUseCase,
)
from agendabot.domain.entities.intent import DetectIntentResult, OutputContext

BOOKING_TRIGGER = re.compile(r"\b(marcar|agendar)\b", re.IGNORECASE)


class MockIntentDetector(IntentDetectionPort):
    """
    Local stand-in for the intent agent: routes booking utterances to the
    fulfillment use case in-process and keeps the output contexts per session.
    Anything else falls through to the fallback intent.
    """

    def __init__(self, fulfillment: HandleFulfillmentUseCase, project_id: str = "local") -> None:
        self._fulfillment = fulfillment
        self._project_id = project_id
        self._contexts: dict[str, list[OutputContext]] = {}
        self._logger = logging.getLogger(__name__)

    def detect_intent(self, session_id: str, text: str, sender_id: str | None = None) -> DetectIntentResult:
        session_path = f"projects/{self._project_id}/agent/sessions/{session_id}"
        contexts = [c for c in self._contexts.get(session_id, []) if c.lifespan_count > 0]

        if any(c.short_name == BOOKING_CONTEXT for c in contexts):
            intent = BOOKING_INTENTS[0]
        elif BOOKING_TRIGGER.search(text):
            intent = BOOKING_START_INTENT
        else:
            intent = "Default Fallback Intent"

        result = self._fulfillment.handle(intent, text, session_path, contexts, sender_id=sender_id)
        self._contexts[session_id] = [c for c in result.output_contexts if c.lifespan_count > 0]
        self._logger.info("Mock intent detected", extra={"session_id": session_id, "intent": intent})
        return DetectIntentResult(
            fulfillment_text=result.text,
            intent_name=intent,
            output_contexts=list(result.output_contexts),
        )
