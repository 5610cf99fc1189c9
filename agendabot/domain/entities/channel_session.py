from dataclasses import dataclass


@dataclass(frozen=True)
class ChannelSession:
    session_id: str
    booking_status: str | None = None  # last BookingStatus value reported by the intent platform
    updated_at: float | None = None
