from agendabot.application.ports.transcriber import TranscriberPort


class MockTranscriber(TranscriberPort):
    def __init__(self, transcripts: dict[str, str] | None = None) -> None:
        self._transcripts = dict(transcripts or {})

    def transcribe(self, audio_url: str) -> str:
        return self._transcripts.get(audio_url, "Quero marcar uma consulta")
