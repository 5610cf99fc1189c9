import pytest

from agendabot.application.exceptions import UpstreamAuthError
from agendabot.core.config import Settings
from agendabot.domain.entities.channel_session import ChannelSession
from agendabot.infrastructure.dialogflow.mock_intent_detector import MockIntentDetector
from agendabot.wiring.dependencies import validate_required_credentials


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_dev_starts_without_credentials():
    validate_required_credentials(make_settings(ENV="dev"))


def test_production_requires_every_credential():
    with pytest.raises(UpstreamAuthError) as exc:
        validate_required_credentials(make_settings(ENV="prod", OPENAI_API_KEY="sk-test"))

    message = str(exc.value)
    assert "CALENDAR_ID" in message
    assert "TWILIO_AUTH_TOKEN" in message
    assert "OPENAI_API_KEY" not in message


def test_production_with_credentials_passes():
    validate_required_credentials(
        make_settings(
            ENV="prod",
            GOOGLE_APPLICATION_CREDENTIALS_JSON='{"type": "service_account"}',
            DIALOGFLOW_PROJECT_ID="demo",
            CALENDAR_ID="primary",
            TWILIO_ACCOUNT_SID="AC123",
            TWILIO_AUTH_TOKEN="token",
            TWILIO_PHONE_NUMBER="+14155238886",
            OPENAI_API_KEY="sk-test",
        )
    )


def test_mock_intent_detector_drives_booking_flow(fulfillment):
    detector = MockIntentDetector(fulfillment, project_id="local")

    offer = detector.detect_intent("s1", "Quero marcar uma consulta")
    assert offer.intent_name == "Marcar Consulta (Início)"
    assert offer.find_context("marcar_consulta_flow").parameters["state"] == "AWAITING_SLOT_SELECTION"

    chosen = detector.detect_intent("s1", "1")
    assert chosen.find_context("marcar_consulta_flow").parameters["chosenSlot"] == "14/01/2025 14:00"


def test_mock_intent_detector_falls_back_outside_flow(fulfillment, llm):
    detector = MockIntentDetector(fulfillment)

    result = detector.detect_intent("s2", "Qual o valor?")

    assert result.intent_name == "Default Fallback Intent"
    assert result.fulfillment_text == "Posso ajudar com mais alguma coisa?"
    assert llm.prompts == ["Qual o valor?"]


def test_mock_intent_detector_passes_sender_to_fallback_reset(fulfillment, session_store):
    sender = "whatsapp:+5561999999999"
    session_store.put(sender, ChannelSession(session_id="s3", booking_status="AWAITING_PHONE"))
    detector = MockIntentDetector(fulfillment)

    detector.detect_intent("s3", "Qual o valor?", sender_id=sender)

    assert session_store.get(sender).session_id == "s3"
    assert session_store.get(sender).booking_status is None
