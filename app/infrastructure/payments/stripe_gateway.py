from __future__ import annotations

import logging
from typing import Any

import stripe

from app.application.exceptions import PaymentConfigurationError, PaymentError, WebhookSignatureError
from app.application.ports.payment_gateway import PaymentGatewayPort
from app.core.config import settings
from app.domain.entities.payment import PaymentEvent, PaymentIntent


def _plain(value: Any) -> dict[str, Any]:
    if not value:
        return {}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return dict(value)


def _to_intent(obj: Any) -> PaymentIntent:
    last_error = getattr(obj, "last_payment_error", None)
    return PaymentIntent(
        id=obj.id,
        client_secret=getattr(obj, "client_secret", None),
        amount=int(getattr(obj, "amount", 0) or 0),
        currency=str(getattr(obj, "currency", "") or ""),
        status=str(getattr(obj, "status", "") or ""),
        metadata={k: str(v) for k, v in _plain(getattr(obj, "metadata", None)).items()},
        receipt_email=getattr(obj, "receipt_email", None),
        last_payment_error=getattr(last_error, "message", None) if last_error else None,
    )


class StripePaymentGateway(PaymentGatewayPort):
    def __init__(
        self,
        secret_key: str | None = None,
        webhook_secret: str | None = None,
        api_version: str | None = None,
    ) -> None:
        self._secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self._webhook_secret = webhook_secret or settings.STRIPE_WEBHOOK_SECRET
        self._logger = logging.getLogger(__name__)

        if not self._secret_key:
            raise PaymentConfigurationError("STRIPE_SECRET_KEY is required for Stripe payments")

        self._client = stripe.StripeClient(
            self._secret_key,
            stripe_version=api_version or settings.STRIPE_API_VERSION,
        )

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None = None,
        description: str | None = None,
    ) -> PaymentIntent:
        params: dict[str, Any] = {
            "amount": amount,
            "currency": currency.lower(),
            "metadata": metadata,
        }
        if receipt_email:
            params["receipt_email"] = receipt_email
        if description:
            params["description"] = description

        try:
            intent = self._client.payment_intents.create(params=params)
        except stripe.StripeError as e:
            self._logger.error("Stripe payment intent creation error", extra={"error": str(e)})
            raise PaymentError(e.user_message or str(e)) from e

        self._logger.info("Payment intent created", extra={"payment_intent_id": intent.id, "amount": amount})
        return _to_intent(intent)

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = self._client.payment_intents.retrieve(payment_intent_id)
        except stripe.StripeError as e:
            self._logger.error(
                "Stripe payment intent lookup error",
                extra={"payment_intent_id": payment_intent_id, "error": str(e)},
            )
            raise PaymentError(e.user_message or str(e)) from e
        return _to_intent(intent)

    def construct_event(self, payload: bytes, signature_header: str) -> PaymentEvent:
        if not self._webhook_secret:
            raise PaymentConfigurationError("STRIPE_WEBHOOK_SECRET is required for webhook verification")

        try:
            event = stripe.Webhook.construct_event(payload, signature_header, self._webhook_secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            raise WebhookSignatureError(str(e)) from e

        intent = None
        obj = event.data.object
        if getattr(obj, "object", None) == "payment_intent":
            intent = _to_intent(obj)
        return PaymentEvent(id=event.id, type=event.type, payment_intent=intent)
