from abc import ABC, abstractmethod

from agendabot.domain.entities.channel_session import ChannelSession


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, key: str) -> ChannelSession | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, session: ChannelSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError
