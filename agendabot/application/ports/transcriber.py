from abc import ABC, abstractmethod


class TranscriberPort(ABC):
    @abstractmethod
    def transcribe(self, audio_url: str) -> str:
        """Download the audio at ``audio_url`` and return its transcription."""
        raise NotImplementedError
