from abc import ABC, abstractmethod


class LLMPort(ABC):
    @abstractmethod
    def complete(self, text: str) -> str:
        """
        Return a free-text completion for an utterance no intent matched.

        Raises:
            LLMUpstreamError: provider failure or empty completion
        """
        raise NotImplementedError
