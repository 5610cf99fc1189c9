from __future__ import annotations

import logging
import time
import uuid

from agendabot.application.exceptions import IntentDetectionFailed, TranscriptionFailed
from agendabot.application.ports.intent_detection import IntentDetectionPort
from agendabot.application.ports.session_store import SessionStorePort
from agendabot.application.ports.transcriber import TranscriberPort
from agendabot.application.use_cases.handle_fulfillment import BOOKING_CONTEXT
from agendabot.application.use_cases.send_reply import SendReplyUseCase
from agendabot.application.utils import input_parsing
from agendabot.application.utils.retry import NO_RETRY, RetryPolicy
from agendabot.domain.entities.booking_state import BookingStatus
from agendabot.domain.entities.channel_session import ChannelSession
from agendabot.domain.entities.message import InboundMessage

DEFAULT_REPLY_TEXT = "Desculpe, não entendi."

# Slot-filling phrases the intent agent is trained on, keyed by the state awaiting them.
SLOT_PREFIXES: dict[str, tuple[str, str]] = {
    BookingStatus.AWAITING_NAME.value: ("meu nome é", "Meu nome é "),
    BookingStatus.AWAITING_EMAIL.value: ("meu e-mail é", "Meu e-mail é "),
    BookingStatus.AWAITING_PHONE.value: ("meu telefone é", "Meu telefone é "),
}


def apply_slot_prefix(text: str, booking_status: str | None) -> str:
    rule = SLOT_PREFIXES.get(booking_status or "")
    if rule is None or input_parsing.is_cancel_request(text):
        return text
    marker, prefix = rule
    if marker in text.lower():
        return text
    return prefix + text


class HandleIncomingMessageUseCase:
    """Relays one inbound chat message to the intent platform and the reply back to the sender."""

    def __init__(
        self,
        sessions: SessionStorePort,
        transcriber: TranscriberPort,
        intent_detection: IntentDetectionPort,
        send_reply: SendReplyUseCase,
        retry_policy: RetryPolicy = NO_RETRY,
    ) -> None:
        self._sessions = sessions
        self._transcriber = transcriber
        self._intent_detection = intent_detection
        self._send_reply = send_reply
        self._retry = retry_policy
        self._logger = logging.getLogger(__name__)

    def handle(self, message: InboundMessage) -> str:
        session = self._sessions.get(message.sender_id)
        if session is None:
            session = ChannelSession(session_id=str(uuid.uuid4()), updated_at=time.time())
            self._sessions.put(message.sender_id, session)
            self._logger.info(
                "New session created",
                extra={"sender_id": message.sender_id, "session_id": session.session_id},
            )

        text = message.text
        if message.media_url:
            text = self._transcribe(message.media_url)

        text = apply_slot_prefix(text, session.booking_status)
        self._logger.info(
            "Forwarding message to intent detection",
            extra={"session_id": session.session_id, "state": session.booking_status},
        )

        try:
            result = self._retry.call(
                self._intent_detection.detect_intent, session.session_id, text, sender_id=message.sender_id
            )
        except IntentDetectionFailed:
            raise
        except Exception as e:
            raise IntentDetectionFailed(str(e)) from e

        reply = result.fulfillment_text or DEFAULT_REPLY_TEXT

        flow = result.find_context(BOOKING_CONTEXT)
        new_status = str(flow.parameters.get("state") or "") if flow else ""
        if not new_status or new_status == BookingStatus.FINISHED.value:
            new_status = None
        # Last write wins for concurrent messages from the same sender.
        self._sessions.put(
            message.sender_id,
            ChannelSession(session_id=session.session_id, booking_status=new_status, updated_at=time.time()),
        )

        self._send_reply.execute(message.sender_id, reply)
        return reply

    def _transcribe(self, media_url: str) -> str:
        self._logger.info("Transcribing audio attachment")
        try:
            text = self._transcriber.transcribe(media_url)
        except TranscriptionFailed:
            raise
        except Exception as e:
            raise TranscriptionFailed(str(e)) from e
        if not text or not text.strip():
            raise TranscriptionFailed("Empty transcription")
        return text.strip()
