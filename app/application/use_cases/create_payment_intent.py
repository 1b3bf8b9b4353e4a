from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from app.application.ports.payment_gateway import PaymentGatewayPort
from app.domain.entities.booking import BookingDraft
from app.domain.entities.payment import PaymentIntent


def booking_payload(draft: BookingDraft) -> dict[str, Any]:
    """Shape a draft the way the browser posts it to the payment endpoint."""
    service = None
    if draft.service:
        service = {
            "id": draft.service.id,
            "name": draft.service.name,
            "price": draft.service.price,
            "description": draft.service.description,
            "features": list(draft.service.features),
        }
    details = draft.customer_details
    return {
        "service": service,
        "date": draft.date,
        "timeSlot": draft.time_slot,
        "customerDetails": {
            "name": details.name,
            "email": details.email,
            "phone": details.phone,
            "address": details.address,
            "postcode": details.postcode,
            "specialInstructions": details.special_instructions,
        },
    }


class CreatePaymentIntentUseCase:
    def __init__(self, gateway: PaymentGatewayPort, currency: str = "gbp", business_name: str = "1clickclearance") -> None:
        self._gateway = gateway
        self._currency = currency
        self._business_name = business_name
        self._logger = logging.getLogger(__name__)

    @property
    def currency(self) -> str:
        return self._currency

    def execute(self, amount: Any, booking: Any) -> PaymentIntent:
        """Create an intent for `amount` pence. Raises ValueError or PaymentError."""
        if not amount or not booking or not isinstance(booking, dict):
            raise ValueError("Amount and booking data are required")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError("Amount must be a whole number of pence")

        service = booking.get("service") or {}
        details = booking.get("customerDetails") or {}
        service_name = service.get("name") or "Unknown Service"

        metadata = {
            "service_name": service_name,
            "service_price": str(service.get("price") if service.get("price") is not None else "0"),
            "customer_name": details.get("name") or "",
            "customer_email": details.get("email") or "",
            "customer_phone": details.get("phone") or "",
            "booking_date": booking.get("date") or "",
            "collection_address": details.get("address") or "",
            "postcode": details.get("postcode") or "",
            "special_instructions": details.get("specialInstructions") or "",
            "booking_timestamp": datetime.now(timezone.utc).isoformat(),
        }

        intent = self._gateway.create_payment_intent(
            amount=amount,
            currency=self._currency,
            metadata=metadata,
            receipt_email=details.get("email") or None,
            description=f"{self._business_name} - {service.get('name') or 'Service'} Booking",
        )
        self._logger.info(
            "Payment intent ready",
            extra={"payment_intent_id": intent.id, "service": service_name},
        )
        return intent
