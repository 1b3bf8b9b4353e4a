from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str | None
    amount: int  # pence
    currency: str
    status: str  # "requires_payment_method", "succeeded", "canceled", ...
    metadata: dict[str, str] = field(default_factory=dict)
    receipt_email: str | None = None
    last_payment_error: str | None = None


@dataclass(frozen=True)
class PaymentEvent:
    id: str
    type: str
    payment_intent: PaymentIntent | None = None


@dataclass(frozen=True)
class PaymentRecord:
    payment_intent_id: str
    amount_paid: float  # pounds
    currency: str
    customer_email: str | None
    service_name: str | None
    service_price: str | None
    customer_name: str | None
    customer_phone: str | None
    booking_date: str | None
    collection_address: str | None
    postcode: str | None
    special_instructions: str | None
    booking_timestamp: str | None
    payment_status: str
    created_at: str
