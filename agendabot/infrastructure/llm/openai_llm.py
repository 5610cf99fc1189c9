from __future__ import annotations

from openai import OpenAI

from agendabot.application.exceptions import LLMUpstreamError
from agendabot.application.ports.llm import LLMPort
from agendabot.core.config import settings


class OpenAILLM(LLMPort):
    """
    OpenAI-backed adapter implementing LLMPort.

    Raises:
        LLMUpstreamError: networking/provider failures or an empty completion
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def complete(self, text: str) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_COMPLETION,
                messages=[{"role": "user", "content": text}],
                temperature=settings.OPENAI_TEMPERATURE_COMPLETION,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMUpstreamError("LLM returned empty response text.")
        return content
