from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx
from openai import OpenAI

from agendabot.application.exceptions import TranscriptionFailed
from agendabot.application.ports.transcriber import TranscriberPort
from agendabot.core.config import settings


class OpenAITranscriber(TranscriberPort):
    def __init__(
        self,
        client: OpenAI | None = None,
        http_client: httpx.Client | None = None,
        media_auth: tuple[str, str] | None = None,
    ) -> None:
        self._client = client or OpenAI(api_key=settings.OPENAI_API_KEY)
        self._http = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS, follow_redirects=True)
        self._media_auth = media_auth
        self._logger = logging.getLogger(__name__)

    def transcribe(self, audio_url: str) -> str:
        try:
            resp = self._http.get(audio_url, auth=self._media_auth)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Error downloading audio", extra={"error": str(e)})
            raise TranscriptionFailed(f"Could not download audio: {e}") from e

        content_type = resp.headers.get("content-type", "audio/ogg").split(";")[0].strip()
        filename = urlparse(audio_url).path.rsplit("/", 1)[-1] or "audio"
        if "." not in filename:
            filename = f"{filename}.{content_type.rsplit('/', 1)[-1] or 'ogg'}"

        try:
            result = self._client.audio.transcriptions.create(
                model=settings.OPENAI_MODEL_TRANSCRIBE,
                file=(filename, resp.content, content_type),
            )
        except Exception as e:
            self._logger.error("Error transcribing audio", extra={"error": str(e)})
            raise TranscriptionFailed(f"OpenAI transcription error: {e}") from e

        text = (getattr(result, "text", "") or "").strip()
        if not text:
            raise TranscriptionFailed("Empty transcription")
        return text
