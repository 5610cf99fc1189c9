from __future__ import annotations

import logging

import httpx

from agendabot.core.config import settings


class TwilioClient:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._base_url = (base_url or settings.TWILIO_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        url = f"{self._base_url}/Accounts/{self._account_sid}/Messages.json"
        data = {
            "To": recipient_id,
            "From": f"whatsapp:{self._from_number}",
            "Body": text,
        }
        resp = self._client.post(url, data=data, auth=(self._account_sid, self._auth_token))
        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("code")
                error_message = error_json.get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "Twilio send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error": error_message,
                    "sender_id": recipient_id,
                    "text_length": len(text),
                },
            )
            resp.raise_for_status()
