from pydantic import BaseModel, ConfigDict, Field
from typing import Any


class PaymentIntentRequestSchema(BaseModel):
    amount: Any = None
    booking: Any = None


class PaymentIntentResponseSchema(BaseModel):
    client_secret: str | None
    payment_intent_id: str


class FormRelayRequestSchema(BaseModel):
    form_name: str | None = None
    data: Any = None


class ServiceSchema(BaseModel):
    id: str
    name: str
    price: int
    description: str
    features: list[str] = Field(default_factory=list)


class PricedItemSchema(BaseModel):
    name: str
    price: int
    category: str


class ItemSelectionSchema(BaseModel):
    selected_items: dict[str, int] = Field(default_factory=dict)


class ItemTotalResponseSchema(BaseModel):
    price: int
    description: str
    subtotal: int
    minimum_applied: bool
    selected_items_count: int


class QuoteRequestSchema(BaseModel):
    service_type: str
    volume: str
    accessibility: str
    urgency: str


class QuoteResponseSchema(BaseModel):
    estimated_price: int


class PostcodeResponseSchema(BaseModel):
    postcode: str
    is_valid: bool
    message: str
    type: str
    area: str | None = None


class HandoffRequestSchema(BaseModel):
    session_id: str
    pricing_type: str
    service_id: str | None = None
    selected_items: dict[str, int] = Field(default_factory=dict)


class SelectedServiceSchema(BaseModel):
    service: str
    description: str
    features: list[str] = Field(default_factory=list)


class PricingSelectionSchema(BaseModel):
    pricing_type: str
    calculated_price: int
    selected_service: SelectedServiceSchema | None = None
    selected_items: dict[str, int] = Field(default_factory=dict)


class ContactFormSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""


class ContactInfoSchema(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class QuoteFormSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    serviceType: str = ""
    wasteType: str = ""
    volumeEstimate: str = ""
    location: str = ""
    accessibility: str = ""
    urgency: str = ""
    contactInfo: ContactInfoSchema = Field(default_factory=ContactInfoSchema)


class FormSubmissionResponseSchema(BaseModel):
    success: bool
    quote_id: str | None = None
    estimated_price: int | None = None


class SelectServiceSchema(BaseModel):
    service_id: str


class CustomerDetailsSchema(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    postcode: str = ""
    special_instructions: str = ""


class CustomerDetailsPatchSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    postcode: str | None = None
    special_instructions: str | None = None


class PostcodeVerdictSchema(BaseModel):
    is_valid: bool
    message: str
    type: str
    area: str | None = None


class WizardStateSchema(BaseModel):
    session_id: str
    step: int
    service: ServiceSchema | None = None
    customer_details: CustomerDetailsSchema
    prefilled_data: PricingSelectionSchema | None = None
    postcode_validation: PostcodeVerdictSchema | None = None
    payment_intent_id: str | None = None
    payment_error: str | None = None
    out_of_area: bool = False
    calendar_url: str | None = None


class WizardOutcomeSchema(BaseModel):
    state: WizardStateSchema
    errors: dict[str, list[str]] = Field(default_factory=dict)
    message: str | None = None
    alternate_links: list[str] = Field(default_factory=list)
    client_secret: str | None = None
    redirect: str | None = None


class ConfirmPaymentSchema(BaseModel):
    payment_intent_id: str


class PaymentFailureSchema(BaseModel):
    message: str | None = None


class CompletedBookingSchema(BaseModel):
    service: ServiceSchema | None = None
    customer_details: CustomerDetailsSchema
    prefilled_data: PricingSelectionSchema | None = None
    completed_at: str
    payment_intent_id: str | None = None
    amount_paid: int
