from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from agendabot.application.exceptions import TranscriptionFailed
from agendabot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from agendabot.core.config import settings
from agendabot.domain.entities.message import InboundMessage
from agendabot.infrastructure.whatsapp.webhook_verify import verify_twilio_signature
from agendabot.wiring.dependencies import get_handle_incoming_message_use_case

router = APIRouter()
logger = logging.getLogger(__name__)

INVALID_REQUEST_TEXT = "Requisição inválida."
AUDIO_ERROR_TEXT = "Erro ao processar o áudio enviado."
PROCESSING_ERROR_TEXT = "Erro ao processar a mensagem."
SUCCESS_TEXT = "Mensagem processada com sucesso."


@router.post("/webhook")
async def whatsapp_webhook(
    request: Request,
    use_case: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> PlainTextResponse:
    form = await request.form()
    params = {key: str(value) for key, value in form.items()}

    if settings.TWILIO_VALIDATE_SIGNATURE:
        url = settings.WEBHOOK_PUBLIC_URL or str(request.url)
        signature = request.headers.get("X-Twilio-Signature")
        if not verify_twilio_signature(url, params, signature, settings.TWILIO_AUTH_TOKEN, settings.ENV):
            logger.warning("Rejected webhook with invalid signature")
            return PlainTextResponse("Assinatura inválida.", status_code=403)

    sender_id = params.get("From", "").strip()
    text = params.get("Body", "").strip()
    media_url = params.get("MediaUrl0", "").strip() or None
    if not sender_id or (not text and not media_url):
        logger.warning("Invalid webhook request", extra={"sender_id": sender_id or None})
        return PlainTextResponse(INVALID_REQUEST_TEXT, status_code=400)

    message = InboundMessage(sender_id=sender_id, text=text, media_url=media_url)
    logger.info("Webhook received", extra={"sender_id": sender_id})

    try:
        await run_in_threadpool(use_case.handle, message)
    except TranscriptionFailed as e:
        logger.exception("Error transcribing audio", extra={"sender_id": sender_id, "error": str(e)})
        return PlainTextResponse(AUDIO_ERROR_TEXT, status_code=500)
    except Exception as e:
        logger.exception("Error processing message", extra={"sender_id": sender_id, "error": str(e)})
        return PlainTextResponse(PROCESSING_ERROR_TEXT, status_code=500)

    return PlainTextResponse(SUCCESS_TEXT)
