from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from agendabot.api.fulfillment import router as fulfillment_router
from agendabot.api.webhooks import router as webhooks_router
from agendabot.core.config import settings
from agendabot.wiring.dependencies import validate_required_credentials

LOG_CONTEXT_KEYS = (
    "session_id",
    "intent",
    "state",
    "slot",
    "sender_id",
    "calendar_id",
    "event_id",
    "chunks",
    "text_length",
    "status",
    "error_code",
    "attempt",
    "max_attempts",
    "error",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in LOG_CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    validate_required_credentials(settings)
    yield


app = FastAPI(title="WhatsApp Appointment Assistant", version="1.0.0", lifespan=lifespan)

app.include_router(webhooks_router, tags=["webhooks"])
app.include_router(fulfillment_router, tags=["fulfillment"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
