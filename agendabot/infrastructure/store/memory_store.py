from __future__ import annotations

from agendabot.application.ports.session_store import SessionStorePort
from agendabot.domain.entities.channel_session import ChannelSession


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._sessions: dict[str, ChannelSession] = {}

    def get(self, key: str) -> ChannelSession | None:
        return self._sessions.get(key)

    def put(self, key: str, session: ChannelSession) -> None:
        self._sessions[key] = session

    def delete(self, key: str) -> None:
        self._sessions.pop(key, None)
