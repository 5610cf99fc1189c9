from __future__ import annotations

import json
import logging
import threading

from google.auth.transport.requests import Request
from google.oauth2 import service_account

from agendabot.application.exceptions import UpstreamAuthError

SCOPES = (
    "https://www.googleapis.com/auth/dialogflow",
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
)


class GoogleTokenProvider:
    """Mints and caches OAuth access tokens for a service account."""

    def __init__(self, credentials_json: str | None, scopes: tuple[str, ...] = SCOPES) -> None:
        if not credentials_json:
            raise UpstreamAuthError("GOOGLE_APPLICATION_CREDENTIALS_JSON is required")
        try:
            info = json.loads(credentials_json)
            self._credentials = service_account.Credentials.from_service_account_info(info, scopes=list(scopes))
        except (ValueError, KeyError) as e:
            raise UpstreamAuthError(f"Invalid Google service account credentials: {e}") from e
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_token(self) -> str:
        with self._lock:
            if not self._credentials.valid:
                try:
                    self._credentials.refresh(Request())
                except Exception as e:
                    self._logger.error("Google token refresh failed", extra={"error": str(e)})
                    raise UpstreamAuthError(f"Could not obtain Google access token: {e}") from e
            return self._credentials.token

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.get_token()}"}
