from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone

from app.application.ports.payment_gateway import PaymentGatewayPort
from app.domain.entities.payment import PaymentEvent, PaymentIntent, PaymentRecord


def build_payment_record(intent: PaymentIntent) -> PaymentRecord:
    meta = intent.metadata
    return PaymentRecord(
        payment_intent_id=intent.id,
        amount_paid=intent.amount / 100,
        currency=intent.currency,
        customer_email=intent.receipt_email,
        service_name=meta.get("service_name"),
        service_price=meta.get("service_price"),
        customer_name=meta.get("customer_name"),
        customer_phone=meta.get("customer_phone"),
        booking_date=meta.get("booking_date"),
        collection_address=meta.get("collection_address"),
        postcode=meta.get("postcode"),
        special_instructions=meta.get("special_instructions"),
        booking_timestamp=meta.get("booking_timestamp"),
        payment_status="completed",
        created_at=datetime.now(timezone.utc).isoformat(),
    )


class HandlePaymentWebhookUseCase:
    def __init__(self, gateway: PaymentGatewayPort) -> None:
        self._gateway = gateway
        self._logger = logging.getLogger(__name__)
        self.records: deque[PaymentRecord] = deque(maxlen=100)

    def verify(self, body: bytes, signature: str) -> PaymentEvent:
        """Raises WebhookSignatureError; nothing is processed on failure."""
        return self._gateway.construct_event(body, signature)

    def handle(self, event: PaymentEvent) -> PaymentRecord | None:
        if event.type == "payment_intent.succeeded" and event.payment_intent:
            intent = event.payment_intent
            self._logger.info(
                "Payment succeeded",
                extra={"payment_intent_id": intent.id, "amount": intent.amount, "currency": intent.currency},
            )
            record = build_payment_record(intent)
            self.records.append(record)
            self._logger.info(
                "New booking created",
                extra={
                    "payment_intent_id": record.payment_intent_id,
                    "service": record.service_name,
                    "amount_paid": record.amount_paid,
                },
            )
            return record

        if event.type == "payment_intent.payment_failed" and event.payment_intent:
            self._logger.info(
                "Payment failed",
                extra={
                    "payment_intent_id": event.payment_intent.id,
                    "error": event.payment_intent.last_payment_error,
                },
            )
            return None

        self._logger.info("Unhandled event type", extra={"event_type": event.type})
        return None
