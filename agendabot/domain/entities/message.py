from dataclasses import dataclass


@dataclass(frozen=True)
class InboundMessage:
    sender_id: str
    text: str
    media_url: str | None = None
