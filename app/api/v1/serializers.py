from __future__ import annotations

from dataclasses import asdict

from app.api.v1.schemas import (
    CompletedBookingSchema, CustomerDetailsSchema, PostcodeVerdictSchema,
    PricingSelectionSchema, SelectedServiceSchema, ServiceSchema,
    WizardOutcomeSchema, WizardStateSchema,
)
from app.application.use_cases.booking_wizard import WizardOutcome
from app.domain.entities.booking import CompletedBooking, PricingSelection, WizardState
from app.domain.entities.service_option import ServiceOption
from app.domain.entities.wizard_step import WizardStep


def service_schema(service: ServiceOption | None) -> ServiceSchema | None:
    if service is None:
        return None
    return ServiceSchema(
        id=service.id,
        name=service.name,
        price=service.price,
        description=service.description,
        features=list(service.features),
    )


def selection_schema(selection: PricingSelection | None) -> PricingSelectionSchema | None:
    if selection is None:
        return None
    chosen = selection.selected_service
    return PricingSelectionSchema(
        pricing_type=selection.pricing_type,
        calculated_price=selection.calculated_price,
        selected_service=(
            SelectedServiceSchema(service=chosen.service, description=chosen.description, features=list(chosen.features))
            if chosen else None
        ),
        selected_items=dict(selection.selected_items),
    )


def state_schema(state: WizardState, calendar_url: str | None = None) -> WizardStateSchema:
    verdict = state.postcode_validation
    return WizardStateSchema(
        session_id=state.session_id,
        step=int(state.step),
        service=service_schema(state.draft.service),
        customer_details=CustomerDetailsSchema(**asdict(state.draft.customer_details)),
        prefilled_data=selection_schema(state.prefilled_data),
        postcode_validation=(
            PostcodeVerdictSchema(is_valid=verdict.is_valid, message=verdict.message, type=verdict.type, area=verdict.area)
            if verdict else None
        ),
        payment_intent_id=state.payment_intent_id,
        payment_error=state.payment_error,
        out_of_area=state.out_of_area,
        calendar_url=calendar_url if state.step == WizardStep.SCHEDULING else None,
    )


def outcome_schema(outcome: WizardOutcome, calendar_url: str | None = None) -> WizardOutcomeSchema:
    return WizardOutcomeSchema(
        state=state_schema(outcome.state, calendar_url),
        errors=dict(outcome.errors),
        message=outcome.message,
        alternate_links=list(outcome.alternate_links),
        client_secret=outcome.client_secret,
        redirect=outcome.redirect,
    )


def completed_schema(booking: CompletedBooking) -> CompletedBookingSchema:
    return CompletedBookingSchema(
        service=service_schema(booking.service),
        customer_details=CustomerDetailsSchema(**asdict(booking.customer_details)),
        prefilled_data=selection_schema(booking.prefilled_data),
        completed_at=booking.completed_at,
        payment_intent_id=booking.payment_intent_id,
        amount_paid=booking.amount_paid,
    )
