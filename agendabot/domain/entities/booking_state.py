from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class BookingStatus(str, Enum):
    INITIAL = "INITIAL"
    AWAITING_SLOT_SELECTION = "AWAITING_SLOT_SELECTION"
    AWAITING_NAME = "AWAITING_NAME"
    AWAITING_EMAIL = "AWAITING_EMAIL"
    AWAITING_PHONE = "AWAITING_PHONE"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class Initial:
    status = BookingStatus.INITIAL


@dataclass(frozen=True)
class AwaitingSlotSelection:
    offered_slots: tuple[str, ...]
    page_offset: int
    status = BookingStatus.AWAITING_SLOT_SELECTION


@dataclass(frozen=True)
class AwaitingName:
    chosen_slot: str
    status = BookingStatus.AWAITING_NAME


@dataclass(frozen=True)
class AwaitingEmail:
    chosen_slot: str
    client_name: str
    status = BookingStatus.AWAITING_EMAIL


@dataclass(frozen=True)
class AwaitingPhone:
    chosen_slot: str
    client_name: str
    client_email: str
    status = BookingStatus.AWAITING_PHONE


@dataclass(frozen=True)
class AwaitingConfirmation:
    chosen_slot: str
    client_name: str
    client_email: str
    client_phone: str
    status = BookingStatus.AWAITING_CONFIRMATION


@dataclass(frozen=True)
class Finished:
    event_id: str | None = field(default=None)
    status = BookingStatus.FINISHED


BookingSessionState = Union[
    Initial,
    AwaitingSlotSelection,
    AwaitingName,
    AwaitingEmail,
    AwaitingPhone,
    AwaitingConfirmation,
    Finished,
]
