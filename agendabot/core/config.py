from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GOOGLE_APPLICATION_CREDENTIALS_JSON: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"

    DIALOGFLOW_PROJECT_ID: str | None = None
    DIALOGFLOW_LANGUAGE_CODE: str = "pt-BR"
    DIALOGFLOW_BASE_URL: str = "https://dialogflow.googleapis.com/v2"

    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_PHONE_NUMBER: str | None = None
    TWILIO_BASE_URL: str = "https://api.twilio.com/2010-04-01"

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_COMPLETION: str = "gpt-3.5-turbo"
    OPENAI_TEMPERATURE_COMPLETION: float = 0.7
    OPENAI_MODEL_TRANSCRIBE: str = "whisper-1"

    CALENDAR_ID: str | None = None
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    # Monday=0. Tuesday 14h-19h, Wednesday 8h-13h.
    BUSINESS_HOURS: dict[int, tuple[int, int]] = {1: (14, 19), 2: (8, 13)}
    SLOT_GRANULARITY_MINUTES: int = 60
    APPOINTMENT_DURATION_MINUTES: int = 60
    LOOKAHEAD_WEEKS: int = 2
    SLOT_PAGE_SIZE: int = 4

    CONTEXT_LIFESPAN: int = 5
    MESSAGE_MAX_LENGTH: int = 1600

    RETRY_MAX_ATTEMPTS: int = 1
    RETRY_BACKOFF_SECONDS: float = 0.5
    HTTP_TIMEOUT_SECONDS: float = 10.0

    TWILIO_VALIDATE_SIGNATURE: bool = False
    WEBHOOK_PUBLIC_URL: str | None = None

    SESSION_STORE: str = "memory"
    SESSION_DATA_DIR: str = "./data/sessions"

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() in {"dev", "local"}


settings = Settings()
