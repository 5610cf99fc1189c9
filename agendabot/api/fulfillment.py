from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from agendabot.application.dto.fulfillment import ContextDTO, FulfillmentRequestDTO, FulfillmentResponseDTO
from agendabot.application.use_cases.handle_fulfillment import HandleFulfillmentUseCase
from agendabot.wiring.dependencies import get_fulfillment_use_case

router = APIRouter()
logger = logging.getLogger(__name__)

INVALID_REQUEST_TEXT = "Requisição inválida."
APOLOGY_TEXT = "Desculpe, ocorreu um erro ao processar sua solicitação. Tente novamente mais tarde."


@router.post("/fulfillment")
async def fulfillment(
    request: Request,
    use_case: HandleFulfillmentUseCase = Depends(get_fulfillment_use_case),
) -> JSONResponse:
    try:
        payload = json.loads(await request.body() or b"null")
        dto = FulfillmentRequestDTO.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.warning("Invalid fulfillment request", extra={"error": str(e)})
        return JSONResponse({"fulfillmentText": INVALID_REQUEST_TEXT}, status_code=400)

    intent_name = dto.query_result.intent.display_name
    try:
        result = await run_in_threadpool(
            use_case.handle,
            intent_name,
            dto.query_result.query_text,
            dto.session,
            [ctx.to_entity() for ctx in dto.query_result.output_contexts],
            dto.sender_id(),
        )
    except Exception as e:
        logger.exception("Error handling fulfillment", extra={"intent": intent_name, "error": str(e)})
        return JSONResponse({"fulfillmentText": APOLOGY_TEXT}, status_code=500)

    response = FulfillmentResponseDTO(
        fulfillment_text=result.text,
        output_contexts=[ContextDTO.from_entity(ctx) for ctx in result.output_contexts],
    )
    return JSONResponse(response.model_dump(by_alias=True))
