"""
Tests for the booking session stores (in-memory and JSON file).
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from app.domain.entities.booking import (
    BookingDraft,
    CompletedBooking,
    CustomerDetails,
    PricingSelection,
    SelectedService,
    WizardState,
)
from app.domain.entities.postcode import PostcodeValidationResult
from app.domain.entities.service_option import ServiceOption
from app.infrastructure.store.json_booking_store import JsonBookingSessionStore
from app.infrastructure.store.memory_booking_store import MemoryBookingSessionStore


SERVICE = ServiceOption(
    id="2-yard",
    name="2-Yard",
    price=139,
    description="Similar to 10 bin bags",
    features=("Max Volume: 2 yd",),
)
DETAILS = CustomerDetails(
    name="Jane Smith",
    email="jane@example.com",
    phone="07775605848",
    address="1 High Street, Cambridge",
    postcode="CB1 2AB",
    special_instructions="Side gate",
)
SELECTION = PricingSelection(
    pricing_type="volume",
    calculated_price=139,
    selected_service=SelectedService(service="2-Yard", description="Similar to 10 bin bags", features=("Max Volume: 2 yd",)),
)


@pytest.fixture(params=["memory", "json"])
def session_store(request):
    if request.param == "memory":
        yield MemoryBookingSessionStore()
        return
    with tempfile.TemporaryDirectory() as tmpdir:
        yield JsonBookingSessionStore(data_dir=tmpdir)


def test_handoff_is_read_once(session_store):
    """A hand-off is consumed by the first take."""
    session_store.put_handoff("s1", SELECTION)
    assert session_store.take_handoff("s1") == SELECTION
    assert session_store.take_handoff("s1") is None


def test_wizard_state_round_trip(session_store):
    state = WizardState(
        session_id="s1",
        step=3,
        draft=BookingDraft(service=SERVICE, customer_details=DETAILS),
        prefilled_data=SELECTION,
        postcode_validation=PostcodeValidationResult(
            is_valid=True, message="Great!", type="success", area="Cambridge area"
        ),
        payment_intent_id="pi_123",
        updated_at=1.0,
    )
    session_store.set_wizard("s1", state)
    assert session_store.get_wizard("s1") == state

    session_store.clear_wizard("s1")
    assert session_store.get_wizard("s1") is None


def test_pending_is_separate_from_wizard(session_store):
    state = WizardState(session_id="s1", step=3)
    session_store.put_pending("s1", state)
    assert session_store.get_wizard("s1") is None
    assert session_store.get_pending("s1").step == 3
    session_store.clear_pending("s1")
    assert session_store.get_pending("s1") is None


def test_completed_booking_expires(session_store):
    booking = CompletedBooking(
        service=SERVICE,
        customer_details=DETAILS,
        prefilled_data=SELECTION,
        completed_at="2024-01-01T00:00:00+00:00",
        payment_intent_id="pi_123",
    )
    session_store.put_completed("s1", booking, ttl_seconds=60, now_ts=1000.0)

    assert session_store.get_completed("s1", now_ts=1059.0) == booking
    assert session_store.get_completed("s1", now_ts=1060.0) is None
    assert session_store.get_completed("s1", now_ts=1000.0) is None


def test_sessions_are_isolated(session_store):
    session_store.put_handoff("s1", SELECTION)
    assert session_store.take_handoff("s2") is None


def test_json_store_writes_one_file_per_session():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingSessionStore(data_dir=tmpdir)
        store.put_pending("abc", WizardState(session_id="abc", step=3))

        file_path = Path(tmpdir) / "abc.json"
        assert file_path.exists()
        data = json.loads(file_path.read_text(encoding="utf-8"))
        assert data["pending_booking"]["step"] == 3

        # Survives a new store instance pointed at the same directory
        assert JsonBookingSessionStore(data_dir=tmpdir).get_pending("abc").step == 3


def test_json_store_rejects_unsafe_session_ids():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingSessionStore(data_dir=tmpdir)
        with pytest.raises(ValueError):
            store.get_wizard("../etc/passwd")
