"""
Route tests for pricing, postcode lookup and the booking wizard.
"""

SESSION = "web-session-1"
DETAILS = {
    "name": "Jane Smith",
    "email": "jane@example.com",
    "phone": "07775605848",
    "address": "1 High Street, Cambridge",
    "postcode": "CB1 2AB",
}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_services_and_items(client):
    services = client.get("/api/pricing/services").json()
    assert [s["id"] for s in services][:3] == ["single-item", "1-yard", "2-yard"]
    items = client.get("/api/pricing/items").json()
    assert {"name": "TV", "price": 22, "category": "Appliances"} in items


def test_items_total_applies_minimum(client):
    response = client.post("/api/pricing/items/total", json={"selected_items": {"TV_22": 1}})
    assert response.json() == {
        "price": 65,
        "description": "1 items selected",
        "subtotal": 22,
        "minimum_applied": True,
        "selected_items_count": 1,
    }


def test_items_total_rejects_negative_quantity(client):
    response = client.post("/api/pricing/items/total", json={"selected_items": {"TV_22": -1}})
    assert response.status_code == 400


def test_quote_estimate(client):
    response = client.post(
        "/api/pricing/quote",
        json={"service_type": "residential", "volume": "small", "accessibility": "easy", "urgency": "flexible"},
    )
    assert response.json() == {"estimated_price": 89}


def test_postcode_lookup(client):
    body = client.get("/api/postcodes/CB1 2AB").json()
    assert body["is_valid"] is True
    assert body["area"] == "Cambridge area"
    assert client.get("/api/postcodes/M1 1AA").json()["type"] == "info"


def test_handoff_unknown_service(client):
    response = client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "volume", "service_id": "skip"},
    )
    assert response.status_code == 404


def test_handoff_empty_items(client):
    response = client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "items", "selected_items": {}},
    )
    assert response.status_code == 400


def test_items_total_rejects_price_not_in_catalog(client):
    response = client.post("/api/pricing/items/total", json={"selected_items": {"TV_1": 1}})
    assert response.status_code == 400


def test_handoff_rejects_underpriced_item(client, store):
    """Item hand-offs are priced from the catalog, not the client."""
    response = client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "items", "selected_items": {"Corner Sofa_1": 1}},
    )
    assert response.status_code == 400
    assert store.take_handoff(SESSION) is None


def test_handoff_rejects_unknown_item(client):
    response = client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "items", "selected_items": {"Grand Piano_500": 1}},
    )
    assert response.status_code == 400


def test_handoff_event_carries_booking_session(client, analytics_queue, transport):
    client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "volume", "service_id": "2-yard"},
    )
    analytics_queue.flush()
    assert transport.sent[-1]["event"] == "cta_click"
    assert transport.sent[-1]["sessionId"] == SESSION


def test_booking_flow_over_http(client, gateway):
    """Pricing hand-off through to the confirmation view."""
    handoff = client.post(
        "/api/pricing/handoff",
        json={"session_id": SESSION, "pricing_type": "volume", "service_id": "2-yard"},
    )
    assert handoff.status_code == 200
    assert handoff.json()["calculated_price"] == 139

    state = client.post(f"/api/booking/{SESSION}/start").json()
    assert state["step"] == 2
    assert state["service"]["name"] == "2-Yard"

    state = client.patch(f"/api/booking/{SESSION}/details", json=DETAILS).json()
    assert state["postcode_validation"]["area"] == "Cambridge area"

    outcome = client.post(f"/api/booking/{SESSION}/details/submit").json()
    assert outcome["state"]["step"] == 3

    outcome = client.post(f"/api/booking/{SESSION}/payment").json()
    intent_id = outcome["state"]["payment_intent_id"]
    assert outcome["client_secret"]
    gateway.mark_succeeded(intent_id)

    outcome = client.post(f"/api/booking/{SESSION}/payment/confirm", json={"payment_intent_id": intent_id}).json()
    assert outcome["state"]["step"] == 4
    assert outcome["state"]["calendar_url"]

    outcome = client.post(f"/api/booking/{SESSION}/scheduling/ack").json()
    assert outcome["redirect"] == "/booking-confirmation"
    assert outcome["state"]["step"] == 5

    booking = client.get(f"/api/booking/{SESSION}/confirmation").json()
    assert booking["amount_paid"] == 139
    assert booking["customer_details"]["address"] == "1 High Street, Cambridge"

    assert client.get(f"/api/booking/{SESSION}").status_code == 409


def test_out_of_area_over_http(client):
    client.post(f"/api/booking/{SESSION}/start")
    client.post(f"/api/booking/{SESSION}/service", json={"service_id": "1-yard"})
    client.patch(f"/api/booking/{SESSION}/details", json={**DETAILS, "postcode": "SW1A 1AA"})

    outcome = client.post(f"/api/booking/{SESSION}/details/submit").json()
    assert outcome["state"]["step"] == 2
    assert outcome["state"]["out_of_area"] is True
    assert outcome["alternate_links"] == ["/quote-selection", "/service-areas"]


def test_illegal_transition_is_conflict(client):
    client.post(f"/api/booking/{SESSION}/start")
    assert client.post(f"/api/booking/{SESSION}/payment").status_code == 409
    assert client.post(f"/api/booking/{SESSION}/previous").status_code == 409


def test_unknown_detail_field_is_rejected(client):
    client.post(f"/api/booking/{SESSION}/start")
    client.post(f"/api/booking/{SESSION}/service", json={"service_id": "1-yard"})
    response = client.patch(f"/api/booking/{SESSION}/details", json={"shoe_size": "9"})
    assert response.status_code == 422


def test_confirmation_missing(client):
    assert client.get(f"/api/booking/{SESSION}/confirmation").status_code == 404


def test_reset(client):
    client.post(f"/api/booking/{SESSION}/start")
    client.post(f"/api/booking/{SESSION}/service", json={"service_id": "1-yard"})
    state = client.post(f"/api/booking/{SESSION}/reset").json()
    assert state["step"] == 1
    assert state["service"] is None
