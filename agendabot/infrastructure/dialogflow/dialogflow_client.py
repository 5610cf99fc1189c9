from __future__ import annotations

import logging
from typing import Any

import httpx

from agendabot.application.exceptions import IntentDetectionFailed
from agendabot.application.ports.intent_detection import IntentDetectionPort
from agendabot.core.config import settings
from agendabot.domain.entities.intent import DetectIntentResult, OutputContext
from agendabot.infrastructure.google.credentials import GoogleTokenProvider


class DialogflowClient(IntentDetectionPort):
    def __init__(
        self,
        token_provider: GoogleTokenProvider,
        project_id: str | None = None,
        language_code: str | None = None,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._tokens = token_provider
        self._project_id = project_id or settings.DIALOGFLOW_PROJECT_ID
        self._language_code = language_code or settings.DIALOGFLOW_LANGUAGE_CODE
        self._base_url = (base_url or settings.DIALOGFLOW_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._project_id:
            raise ValueError("DIALOGFLOW_PROJECT_ID is required for Dialogflow")

    def detect_intent(self, session_id: str, text: str, sender_id: str | None = None) -> DetectIntentResult:
        url = f"{self._base_url}/projects/{self._project_id}/agent/sessions/{session_id}:detectIntent"
        payload: dict[str, Any] = {"queryInput": {"text": {"text": text, "languageCode": self._language_code}}}
        if sender_id:
            # Echoed back to fulfillment as originalDetectIntentRequest.payload.
            payload["queryParams"] = {"payload": {"data": {"From": sender_id}}}
        try:
            response = self._client.post(url, json=payload, headers=self._tokens.auth_headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("detectIntent failed", extra={"session_id": session_id, "error": str(e)})
            raise IntentDetectionFailed(str(e)) from e

        return parse_query_result(data.get("queryResult") or {})


def parse_query_result(query_result: dict[str, Any]) -> DetectIntentResult:
    contexts = [
        OutputContext(
            name=str(ctx.get("name", "")),
            lifespan_count=int(ctx.get("lifespanCount", 0) or 0),
            parameters=dict(ctx.get("parameters") or {}),
        )
        for ctx in query_result.get("outputContexts", []) or []
        if isinstance(ctx, dict)
    ]
    return DetectIntentResult(
        fulfillment_text=str(query_result.get("fulfillmentText") or ""),
        intent_name=(query_result.get("intent") or {}).get("displayName"),
        output_contexts=contexts,
    )
