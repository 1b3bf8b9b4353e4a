from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.payment import PaymentEvent, PaymentIntent


class PaymentGatewayPort(ABC):
    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None = None,
        description: str | None = None,
    ) -> PaymentIntent:
        """Create a payment intent for `amount` minor units. Raises PaymentError."""
        raise NotImplementedError

    @abstractmethod
    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Fetch current intent status. Raises PaymentError."""
        raise NotImplementedError

    @abstractmethod
    def construct_event(self, payload: bytes, signature_header: str) -> PaymentEvent:
        """Verify a webhook signature and parse the event. Raises WebhookSignatureError."""
        raise NotImplementedError
