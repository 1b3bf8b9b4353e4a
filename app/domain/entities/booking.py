from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.postcode import PostcodeValidationResult
from app.domain.entities.service_option import ServiceOption


@dataclass(frozen=True)
class CustomerDetails:
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    postcode: str = ""
    special_instructions: str = ""


@dataclass(frozen=True)
class BookingDraft:
    service: ServiceOption | None = None
    date: str | None = None  # ISO date, unused until scheduling is programmatic
    time_slot: str = ""
    customer_details: CustomerDetails = CustomerDetails()


@dataclass(frozen=True)
class SelectedService:
    service: str  # display name, e.g. "2-Yard"
    description: str
    features: tuple[str, ...] = ()


@dataclass(frozen=True)
class PricingSelection:
    """Hand-off written by the pricing page and consumed once by the wizard."""

    pricing_type: str  # "volume" | "items"
    calculated_price: int
    selected_service: SelectedService | None = None
    selected_items: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class WizardState:
    session_id: str
    step: int = 1
    draft: BookingDraft = BookingDraft()
    prefilled_data: PricingSelection | None = None
    postcode_validation: PostcodeValidationResult | None = None
    payment_intent_id: str | None = None
    payment_error: str | None = None
    out_of_area: bool = False
    updated_at: float | None = None


@dataclass(frozen=True)
class CompletedBooking:
    service: ServiceOption | None
    customer_details: CustomerDetails
    prefilled_data: PricingSelection | None
    completed_at: str  # ISO timestamp
    payment_intent_id: str | None = None

    @property
    def amount_paid(self) -> int:
        return self.service.price if self.service else 0
