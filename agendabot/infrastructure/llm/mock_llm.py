from agendabot.application.ports.llm import LLMPort


class MockLLM(LLMPort):
    def __init__(self, reply: str | None = None) -> None:
        self.prompts: list[str] = []
        self._reply = reply

    def complete(self, text: str) -> str:
        self.prompts.append(text)
        if self._reply is not None:
            return self._reply
        return f"Mock resposta para: {text}"
