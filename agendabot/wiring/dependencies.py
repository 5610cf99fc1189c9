from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from agendabot.application.exceptions import UpstreamAuthError
from agendabot.application.ports.calendar import CalendarPort
from agendabot.application.ports.intent_detection import IntentDetectionPort
from agendabot.application.ports.llm import LLMPort
from agendabot.application.ports.message_platform import MessagePlatformPort
from agendabot.application.ports.session_store import SessionStorePort
from agendabot.application.ports.transcriber import TranscriberPort
from agendabot.application.use_cases.appointment_lookup import CancellationDialogue, LookupDialogue
from agendabot.application.use_cases.availability import AvailabilityCalculator
from agendabot.application.use_cases.booking_dialogue import BookingDialogue
from agendabot.application.use_cases.calendar_gateway import CalendarGateway
from agendabot.application.use_cases.handle_fulfillment import HandleFulfillmentUseCase
from agendabot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from agendabot.application.use_cases.send_reply import SendReplyUseCase
from agendabot.application.utils.retry import RetryPolicy
from agendabot.core.config import Settings, settings
from agendabot.domain.entities.availability import AvailabilityWindow
from agendabot.infrastructure.calendar.google_calendar import GoogleCalendar
from agendabot.infrastructure.calendar.mock_calendar import MockCalendar
from agendabot.infrastructure.dialogflow.dialogflow_client import DialogflowClient
from agendabot.infrastructure.dialogflow.mock_intent_detector import MockIntentDetector
from agendabot.infrastructure.google.credentials import GoogleTokenProvider
from agendabot.infrastructure.knowledge.canned_responses import CannedResponseStore
from agendabot.infrastructure.llm.mock_llm import MockLLM
from agendabot.infrastructure.llm.openai_llm import OpenAILLM
from agendabot.infrastructure.speech.mock_transcriber import MockTranscriber
from agendabot.infrastructure.speech.openai_transcriber import OpenAITranscriber
from agendabot.infrastructure.store.json_store import JsonSessionStore
from agendabot.infrastructure.store.memory_store import MemorySessionStore
from agendabot.infrastructure.whatsapp.mock_platform import MockMessagePlatform
from agendabot.infrastructure.whatsapp.twilio_client import TwilioClient
from agendabot.infrastructure.whatsapp.twilio_platform import TwilioWhatsAppPlatform

logger = logging.getLogger(__name__)

MOCK_CALENDAR_ID = "primary"


def validate_required_credentials(cfg: Settings = settings) -> None:
    """Refuse to start outside dev/local when any collaborator credential is missing."""
    if cfg.is_dev:
        return
    required = {
        "GOOGLE_APPLICATION_CREDENTIALS_JSON": cfg.GOOGLE_APPLICATION_CREDENTIALS_JSON,
        "DIALOGFLOW_PROJECT_ID": cfg.DIALOGFLOW_PROJECT_ID,
        "CALENDAR_ID": cfg.CALENDAR_ID,
        "TWILIO_ACCOUNT_SID": cfg.TWILIO_ACCOUNT_SID,
        "TWILIO_AUTH_TOKEN": cfg.TWILIO_AUTH_TOKEN,
        "TWILIO_PHONE_NUMBER": cfg.TWILIO_PHONE_NUMBER,
        "OPENAI_API_KEY": cfg.OPENAI_API_KEY,
    }
    missing = [name for name, value in required.items() if not (value and value.strip())]
    if missing:
        raise UpstreamAuthError(f"Missing required credentials: {', '.join(missing)}")


def get_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=max(1, settings.RETRY_MAX_ATTEMPTS),
        backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
    )


def get_availability_window() -> AvailabilityWindow:
    return AvailabilityWindow(
        business_hours=dict(settings.BUSINESS_HOURS),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        slot_granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        lookahead_weeks=settings.LOOKAHEAD_WEEKS,
    )


@lru_cache
def get_token_provider() -> GoogleTokenProvider:
    return GoogleTokenProvider(settings.GOOGLE_APPLICATION_CREDENTIALS_JSON)


def _use_google() -> bool:
    return bool(settings.GOOGLE_APPLICATION_CREDENTIALS_JSON) or not settings.is_dev


@lru_cache
def get_calendar() -> CalendarPort:
    if not _use_google():
        logger.info("Using MockCalendar (credentials missing, ENV=dev/local)")
        return MockCalendar()
    return GoogleCalendar(token_provider=get_token_provider())


def get_calendar_id() -> str:
    if settings.CALENDAR_ID:
        return settings.CALENDAR_ID
    if settings.is_dev:
        return MOCK_CALENDAR_ID
    raise UpstreamAuthError("CALENDAR_ID is required.")


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    return MockLLM()


@lru_cache
def get_transcriber() -> TranscriberPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        media_auth = None
        if settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN:
            media_auth = (settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        return OpenAITranscriber(media_auth=media_auth)
    return MockTranscriber()


@lru_cache
def get_session_store() -> SessionStorePort:
    if settings.SESSION_STORE.lower() == "json":
        return JsonSessionStore(data_dir=settings.SESSION_DATA_DIR)
    return MemorySessionStore()


@lru_cache
def get_message_platform() -> MessagePlatformPort:
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE_NUMBER):
        if settings.is_dev:
            logger.info("Using MockMessagePlatform (Twilio credentials missing, ENV=dev/local)")
            return MockMessagePlatform()
        raise UpstreamAuthError("Twilio credentials are required to send WhatsApp replies.")

    client = TwilioClient(
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        from_number=settings.TWILIO_PHONE_NUMBER,
    )
    return TwilioWhatsAppPlatform(client=client)


@lru_cache
def get_fulfillment_use_case() -> HandleFulfillmentUseCase:
    retry = get_retry_policy()
    window = get_availability_window()
    calendar = get_calendar()
    calendar_id = get_calendar_id()
    gateway = CalendarGateway(
        calendar=calendar,
        timezone=window.timezone,
        duration_minutes=settings.APPOINTMENT_DURATION_MINUTES,
        retry_policy=retry,
    )
    booking = BookingDialogue(
        availability=AvailabilityCalculator(calendar=calendar, retry_policy=retry),
        gateway=gateway,
        calendar_id=calendar_id,
        window=window,
        page_size=settings.SLOT_PAGE_SIZE,
    )
    return HandleFulfillmentUseCase(
        booking=booking,
        lookup=LookupDialogue(gateway=gateway, calendar_id=calendar_id),
        cancellation=CancellationDialogue(gateway=gateway, calendar_id=calendar_id),
        knowledge_base=CannedResponseStore(),
        llm=get_llm(),
        session_store=get_session_store(),
        context_lifespan=settings.CONTEXT_LIFESPAN,
    )


@lru_cache
def get_intent_detection() -> IntentDetectionPort:
    if not _use_google() or not settings.DIALOGFLOW_PROJECT_ID:
        if not settings.is_dev:
            raise UpstreamAuthError("DIALOGFLOW_PROJECT_ID is required.")
        logger.info("Using MockIntentDetector (ENV=dev/local)")
        return MockIntentDetector(fulfillment=get_fulfillment_use_case())
    return DialogflowClient(token_provider=get_token_provider())


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    retry = get_retry_policy()
    return HandleIncomingMessageUseCase(
        sessions=get_session_store(),
        transcriber=get_transcriber(),
        intent_detection=get_intent_detection(),
        send_reply=SendReplyUseCase(
            platform=get_message_platform(),
            max_length=settings.MESSAGE_MAX_LENGTH,
            retry_policy=retry,
        ),
        retry_policy=retry,
    )
