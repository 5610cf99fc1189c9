from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

SLOT_FORMAT = "%d/%m/%Y %H:%M"


def format_slot(moment: datetime, timezone: ZoneInfo) -> str:
    return moment.astimezone(timezone).strftime(SLOT_FORMAT)


def parse_slot(slot: str, timezone: ZoneInfo) -> datetime:
    """Parse a ``dd/mm/YYYY HH:MM`` slot into an aware datetime in ``timezone``."""
    return datetime.strptime(slot.strip(), SLOT_FORMAT).replace(tzinfo=timezone)
