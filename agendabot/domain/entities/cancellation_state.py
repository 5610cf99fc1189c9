from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CancellationState:
    status: str = "NONE"  # "NONE", "AWAITING_EMAIL_FOR_CANCEL", "AWAITING_CANCEL_SELECTION", "FINISHED"
    client_email: str | None = None
