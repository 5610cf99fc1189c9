from abc import ABC, abstractmethod

from agendabot.domain.entities.intent import DetectIntentResult


class IntentDetectionPort(ABC):
    @abstractmethod
    def detect_intent(self, session_id: str, text: str, sender_id: str | None = None) -> DetectIntentResult:
        raise NotImplementedError
