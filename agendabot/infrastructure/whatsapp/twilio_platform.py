from __future__ import annotations

from agendabot.application.ports.message_platform import MessagePlatformPort
from agendabot.infrastructure.whatsapp.twilio_client import TwilioClient


class TwilioWhatsAppPlatform(MessagePlatformPort):
    def __init__(self, client: TwilioClient) -> None:
        self._client = client

    def send_text(self, recipient_id: str, text: str) -> None:
        self._client.send_text(recipient_id=recipient_id, text=text)
