from __future__ import annotations

import logging

from agendabot.application.exceptions import MessageDeliveryFailed
from agendabot.application.ports.message_platform import MessagePlatformPort
from agendabot.application.utils.message_chunks import split_message
from agendabot.application.utils.retry import NO_RETRY, RetryPolicy


class SendReplyUseCase:
    def __init__(
        self,
        platform: MessagePlatformPort,
        max_length: int = 1600,
        retry_policy: RetryPolicy = NO_RETRY,
    ) -> None:
        self._platform = platform
        self._max_length = max_length
        self._retry = retry_policy
        self._logger = logging.getLogger(__name__)

    def execute(self, recipient_id: str, text: str) -> int:
        """Send ``text`` in order as chunks no longer than the platform limit. Returns the chunk count."""
        parts = split_message(text, self._max_length)
        for part in parts:
            try:
                self._retry.call(self._platform.send_text, recipient_id=recipient_id, text=part)
            except Exception as e:
                self._logger.error("Error sending reply", extra={"sender_id": recipient_id, "error": str(e)})
                raise MessageDeliveryFailed(str(e)) from e
        self._logger.info("Reply sent", extra={"sender_id": recipient_id, "chunks": len(parts)})
        return len(parts)
