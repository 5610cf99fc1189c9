from abc import ABC, abstractmethod


class KnowledgeBasePort(ABC):
    @abstractmethod
    def get_response(self, intent: str) -> str | None:
        """Return the fixed reply for an informational intent, or None if the intent has none."""
        raise NotImplementedError
