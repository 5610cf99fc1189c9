from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agendabot.domain.entities.intent import OutputContext


class ContextDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    lifespan_count: int = Field(0, alias="lifespanCount")
    parameters: dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> OutputContext:
        return OutputContext(name=self.name, lifespan_count=self.lifespan_count, parameters=dict(self.parameters))

    @classmethod
    def from_entity(cls, ctx: OutputContext) -> "ContextDTO":
        return cls(name=ctx.name, lifespan_count=ctx.lifespan_count, parameters=dict(ctx.parameters))


class IntentDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")


class QueryResultDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query_text: str = Field("", alias="queryText")
    intent: IntentDTO
    output_contexts: list[ContextDTO] = Field(default_factory=list, alias="outputContexts")


class FulfillmentRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session: str = ""
    query_result: QueryResultDTO = Field(alias="queryResult")
    original_detect_intent_request: dict[str, Any] | None = Field(None, alias="originalDetectIntentRequest")

    def sender_id(self) -> str | None:
        payload = (self.original_detect_intent_request or {}).get("payload") or {}
        data = payload.get("data") or {}
        sender = data.get("From")
        return str(sender) if sender else None


class FulfillmentResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fulfillment_text: str = Field(alias="fulfillmentText")
    output_contexts: list[ContextDTO] = Field(default_factory=list, alias="outputContexts")
