from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.booking import router as booking_router
from app.api.v1.forms import router as forms_router
from app.api.v1.payments import router as payments_router
from app.api.v1.pricing import router as pricing_router
from app.api.webhooks import router as webhooks_router
from app.core.config import settings
from app.wiring.dependencies import close_adapters, get_analytics_queue

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "session_id", "step", "form_name", "event_type", "event",
            "payment_intent_id", "service", "amount_paid", "postcode", "error",
        ):
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
async def lifespan(app: FastAPI):
    get_analytics_queue().start()
    yield
    close_adapters()


app = FastAPI(title="1clickclearance Booking", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Stripe-Signature"],
)

app.include_router(payments_router, prefix="/api/payments", tags=["payments"])
app.include_router(forms_router, prefix="/api/forms", tags=["forms"])
app.include_router(pricing_router, prefix="/api", tags=["pricing"])
app.include_router(booking_router, prefix="/api/booking", tags=["booking"])
app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
