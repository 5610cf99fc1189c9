from __future__ import annotations

import logging

from agendabot.application.ports.message_platform import MessagePlatformPort


class MockMessagePlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        self.sent.append((recipient_id, text))
        self._logger.info(
            "Mock send to WhatsApp", extra={"sender_id": recipient_id, "text_length": len(text)}
        )
