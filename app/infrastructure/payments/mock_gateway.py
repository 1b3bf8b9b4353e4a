from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
import time

from app.application.exceptions import PaymentError, WebhookSignatureError
from app.application.ports.payment_gateway import PaymentGatewayPort
from app.domain.entities.payment import PaymentEvent, PaymentIntent


# Matches Stripe's default webhook tolerance.
MAX_WEBHOOK_AGE_SECONDS = 300


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Build a Stripe-style `t=...,v1=...` signature header."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


class MockPaymentGateway(PaymentGatewayPort):
    """In-memory stand-in for Stripe used in dev and tests."""

    def __init__(self, webhook_secret: str = "whsec_dev") -> None:
        self._webhook_secret = webhook_secret
        self._intents: dict[str, PaymentIntent] = {}
        self._logger = logging.getLogger(__name__)
        self.fail_next_create: str | None = None

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None = None,
        description: str | None = None,
    ) -> PaymentIntent:
        if self.fail_next_create:
            message, self.fail_next_create = self.fail_next_create, None
            raise PaymentError(message)
        if amount <= 0:
            raise PaymentError("This value must be greater than or equal to 1.")

        intent_id = f"pi_mock_{secrets.token_hex(8)}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{secrets.token_hex(8)}",
            amount=amount,
            currency=currency.lower(),
            status="requires_payment_method",
            metadata=dict(metadata),
            receipt_email=receipt_email,
        )
        self._intents[intent_id] = intent
        self._logger.info("Mock payment intent created", extra={"payment_intent_id": intent_id, "amount": amount})
        return intent

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        intent = self._intents.get(payment_intent_id)
        if intent is None:
            raise PaymentError(f"No such payment_intent: '{payment_intent_id}'")
        return intent

    def mark_succeeded(self, payment_intent_id: str) -> PaymentIntent:
        return self._set_status(payment_intent_id, "succeeded", None)

    def mark_failed(self, payment_intent_id: str, message: str = "Your card was declined.") -> PaymentIntent:
        return self._set_status(payment_intent_id, "requires_payment_method", message)

    def _set_status(self, payment_intent_id: str, status: str, error: str | None) -> PaymentIntent:
        current = self.retrieve_payment_intent(payment_intent_id)
        updated = PaymentIntent(
            id=current.id,
            client_secret=current.client_secret,
            amount=current.amount,
            currency=current.currency,
            status=status,
            metadata=current.metadata,
            receipt_email=current.receipt_email,
            last_payment_error=error,
        )
        self._intents[payment_intent_id] = updated
        return updated

    def construct_event(self, payload: bytes, signature_header: str) -> PaymentEvent:
        parts = dict(
            item.split("=", 1) for item in signature_header.split(",") if "=" in item
        )
        timestamp = parts.get("t")
        signature = parts.get("v1")
        if not timestamp or not signature:
            raise WebhookSignatureError("Unable to extract timestamp and signatures from header")

        try:
            age = abs(time.time() - int(timestamp))
        except ValueError as e:
            raise WebhookSignatureError("Invalid timestamp in signature header") from e
        if age > MAX_WEBHOOK_AGE_SECONDS:
            raise WebhookSignatureError("Timestamp outside the tolerance zone")

        expected = sign_payload(payload, self._webhook_secret, int(timestamp)).split("v1=", 1)[1]
        if not hmac.compare_digest(expected, signature):
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")

        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise WebhookSignatureError("Invalid payload") from e

        obj = (data.get("data") or {}).get("object") or {}
        intent = None
        if obj.get("object") == "payment_intent":
            last_error = obj.get("last_payment_error") or {}
            intent = PaymentIntent(
                id=str(obj.get("id", "")),
                client_secret=obj.get("client_secret"),
                amount=int(obj.get("amount") or 0),
                currency=str(obj.get("currency") or ""),
                status=str(obj.get("status") or ""),
                metadata={k: str(v) for k, v in (obj.get("metadata") or {}).items()},
                receipt_email=obj.get("receipt_email"),
                last_payment_error=last_error.get("message"),
            )
        return PaymentEvent(id=str(data.get("id", "")), type=str(data.get("type", "")), payment_intent=intent)
