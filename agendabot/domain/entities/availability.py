from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime

    def blocks(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class AvailabilityWindow:
    business_hours: Mapping[int, tuple[int, int]]  # weekday (Monday=0) -> (start_hour, end_hour)
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("America/Sao_Paulo"))
    slot_granularity_minutes: int = 60
    lookahead_weeks: int = 2

    def hours_for(self, weekday: int) -> tuple[int, int] | None:
        return self.business_hours.get(weekday)
