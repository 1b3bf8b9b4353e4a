"""Shared fixtures: in-memory adapters wired into the FastAPI app."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.application.use_cases.analytics import AnalyticsEmitter
from app.application.use_cases.booking_wizard import BookingWizard
from app.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from app.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from app.application.use_cases.relay_form import RelayFormUseCase
from app.application.use_cases.submit_form import SubmitFormUseCase
from app.infrastructure.analytics.log_transport import LoggingAnalyticsTransport
from app.infrastructure.analytics.queue import AnalyticsQueue
from app.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from app.infrastructure.forms.mock_form_relay import MockFormRelay
from app.infrastructure.payments.mock_gateway import MockPaymentGateway
from app.infrastructure.store.memory_booking_store import MemoryBookingSessionStore
from app.main import app
from app.wiring import dependencies


WEBHOOK_SECRET = "whsec_test"
FALLBACK_MESSAGE = (
    "Failed to send message. Please call us directly at 07775 605848 "
    "or email hello@1clickclearance.co.uk"
)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fallback_message() -> str:
    return FALLBACK_MESSAGE


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


@pytest.fixture
def gateway() -> MockPaymentGateway:
    return MockPaymentGateway(webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def relay() -> MockFormRelay:
    return MockFormRelay()


@pytest.fixture
def store() -> MemoryBookingSessionStore:
    return MemoryBookingSessionStore()


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore()


@pytest.fixture
def transport() -> LoggingAnalyticsTransport:
    return LoggingAnalyticsTransport()


@pytest.fixture
def analytics_queue(transport) -> AnalyticsQueue:
    return AnalyticsQueue(transport, maxsize=100)


@pytest.fixture
def analytics(analytics_queue) -> AnalyticsEmitter:
    return AnalyticsEmitter(analytics_queue, session_id="test-session")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wizard(store, catalog, gateway, analytics, clock) -> BookingWizard:
    return BookingWizard(
        store=store,
        catalog=catalog,
        payments=CreatePaymentIntentUseCase(gateway=gateway),
        gateway=gateway,
        analytics=analytics,
        completed_ttl_seconds=60,
        clock=clock,
    )


@pytest.fixture
def submit_form_use_case(relay, analytics) -> SubmitFormUseCase:
    return SubmitFormUseCase(relay=relay, analytics=analytics, fallback_message=FALLBACK_MESSAGE)


@pytest.fixture
def webhook_use_case(gateway) -> HandlePaymentWebhookUseCase:
    return HandlePaymentWebhookUseCase(gateway=gateway)


@pytest.fixture
def client(gateway, store, catalog, analytics, wizard, submit_form_use_case, webhook_use_case):
    overrides = {
        dependencies.get_create_payment_intent_use_case: lambda: CreatePaymentIntentUseCase(gateway=gateway),
        dependencies.get_payment_webhook_use_case: lambda: webhook_use_case,
        dependencies.get_relay_form_use_case: lambda: RelayFormUseCase(recipient="hello@1clickclearance.co.uk"),
        dependencies.get_submit_form_use_case: lambda: submit_form_use_case,
        dependencies.get_booking_wizard: lambda: wizard,
        dependencies.get_service_catalog: lambda: catalog,
        dependencies.get_session_store: lambda: store,
        dependencies.get_analytics: lambda: analytics,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
