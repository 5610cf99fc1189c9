from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OutputContext:
    name: str
    lifespan_count: int
    parameters: dict[str, Any] = field(default_factory=dict)

    @property
    def short_name(self) -> str:
        return self.name.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class DetectIntentResult:
    fulfillment_text: str
    intent_name: str | None = None
    output_contexts: list[OutputContext] = field(default_factory=list)

    def find_context(self, short_name: str) -> OutputContext | None:
        for ctx in self.output_contexts:
            if ctx.short_name == short_name:
                return ctx
        return None
