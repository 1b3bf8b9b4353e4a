from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.analytics_transport import AnalyticsTransportPort
from app.application.ports.booking_session_store import BookingSessionStorePort
from app.application.ports.form_relay import FormRelayPort
from app.application.ports.payment_gateway import PaymentGatewayPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.analytics import AnalyticsEmitter
from app.application.use_cases.booking_wizard import BookingWizard
from app.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from app.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from app.application.use_cases.relay_form import RelayFormUseCase
from app.application.use_cases.submit_form import SubmitFormUseCase
from app.infrastructure.analytics.http_transport import HttpAnalyticsTransport
from app.infrastructure.analytics.log_transport import LoggingAnalyticsTransport
from app.infrastructure.analytics.queue import AnalyticsQueue
from app.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from app.infrastructure.forms.http_form_relay import HttpFormRelay
from app.infrastructure.forms.mock_form_relay import MockFormRelay
from app.infrastructure.payments.mock_gateway import MockPaymentGateway
from app.infrastructure.payments.stripe_gateway import StripePaymentGateway
from app.infrastructure.store.json_booking_store import JsonBookingSessionStore
from app.infrastructure.store.memory_booking_store import MemoryBookingSessionStore


logger = logging.getLogger(__name__)

_session_store: BookingSessionStorePort | None = None


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_session_store() -> BookingSessionStorePort:
    global _session_store
    if _session_store is None:
        if _is_local():
            _session_store = JsonBookingSessionStore(settings.SESSION_STORE_DIR)
        else:
            _session_store = MemoryBookingSessionStore()
    return _session_store


def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_payment_gateway() -> PaymentGatewayPort:
    if not settings.STRIPE_SECRET_KEY:
        if _is_local():
            logger.info("Using MockPaymentGateway (STRIPE_SECRET_KEY missing, ENV=dev/local)")
            return MockPaymentGateway(webhook_secret=settings.STRIPE_WEBHOOK_SECRET or "whsec_dev")
        raise ValueError("STRIPE_SECRET_KEY is required to take payments.")
    logger.info("Using StripePaymentGateway")
    return StripePaymentGateway()


@lru_cache
def get_form_relay() -> FormRelayPort:
    if not settings.FORM_RELAY_URL:
        if _is_local():
            logger.info("Using MockFormRelay (FORM_RELAY_URL missing, ENV=dev/local)")
            return MockFormRelay()
        raise ValueError("FORM_RELAY_URL is required to relay form submissions.")
    return HttpFormRelay(settings.FORM_RELAY_URL)


def get_analytics_transport() -> AnalyticsTransportPort:
    if settings.ANALYTICS_ENDPOINT:
        return HttpAnalyticsTransport(settings.ANALYTICS_ENDPOINT)
    return LoggingAnalyticsTransport()


@lru_cache
def get_analytics_queue() -> AnalyticsQueue:
    return AnalyticsQueue(get_analytics_transport(), maxsize=settings.ANALYTICS_QUEUE_SIZE)


def get_analytics(session_id: str | None = None) -> AnalyticsEmitter:
    return AnalyticsEmitter(get_analytics_queue(), session_id=session_id, debug=settings.ANALYTICS_DEBUG)


def get_create_payment_intent_use_case() -> CreatePaymentIntentUseCase:
    return CreatePaymentIntentUseCase(
        gateway=get_payment_gateway(),
        currency=settings.PAYMENT_CURRENCY,
        business_name=settings.BUSINESS_NAME,
    )


@lru_cache
def get_payment_webhook_use_case() -> HandlePaymentWebhookUseCase:
    return HandlePaymentWebhookUseCase(gateway=get_payment_gateway())


def get_relay_form_use_case() -> RelayFormUseCase:
    return RelayFormUseCase(recipient=settings.CONTACT_EMAIL)


def get_submit_form_use_case() -> SubmitFormUseCase:
    return SubmitFormUseCase(
        relay=get_form_relay(),
        analytics=get_analytics(),
        fallback_message=settings.fallback_contact_message,
    )


def get_booking_wizard(session_id: str) -> BookingWizard:
    return BookingWizard(
        store=get_session_store(),
        catalog=get_service_catalog(),
        payments=get_create_payment_intent_use_case(),
        gateway=get_payment_gateway(),
        analytics=get_analytics(session_id),
        completed_ttl_seconds=settings.COMPLETED_BOOKING_TTL_SECONDS,
    )


def close_adapters() -> None:
    """Release HTTP clients held by cached adapters on shutdown."""
    get_analytics_queue().close()
    if get_form_relay.cache_info().currsize:
        get_form_relay().close()
