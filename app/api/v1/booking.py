from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import (
    CompletedBookingSchema, ConfirmPaymentSchema, CustomerDetailsPatchSchema,
    PaymentFailureSchema, SelectServiceSchema, WizardOutcomeSchema, WizardStateSchema,
)
from app.api.v1.serializers import completed_schema, outcome_schema, state_schema
from app.application.exceptions import UnknownServiceError, WizardTransitionError
from app.application.use_cases.booking_wizard import BookingWizard
from app.core.config import settings
from app.wiring.dependencies import get_booking_wizard

router = APIRouter()


def _calendar_url() -> str:
    return settings.MOTION_CALENDAR_URL


def _call(fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except WizardTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnknownServiceError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/start", response_model=WizardStateSchema)
def start(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return state_schema(_call(wizard.start, session_id), _calendar_url())


@router.get("/{session_id}", response_model=WizardStateSchema)
def get_state(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return state_schema(_call(wizard.get, session_id), _calendar_url())


@router.post("/{session_id}/service", response_model=WizardStateSchema)
def select_service(
    session_id: str,
    req: SelectServiceSchema,
    wizard: BookingWizard = Depends(get_booking_wizard),
):
    return state_schema(_call(wizard.select_service, session_id, req.service_id), _calendar_url())


@router.patch("/{session_id}/details", response_model=WizardStateSchema)
def update_details(
    session_id: str,
    req: CustomerDetailsPatchSchema,
    wizard: BookingWizard = Depends(get_booking_wizard),
):
    changes = req.model_dump(exclude_none=True)
    return state_schema(_call(wizard.update_customer_details, session_id, **changes), _calendar_url())


@router.post("/{session_id}/details/submit", response_model=WizardOutcomeSchema)
def submit_details(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return outcome_schema(_call(wizard.submit_customer_details, session_id), _calendar_url())


@router.post("/{session_id}/payment", response_model=WizardOutcomeSchema)
def start_payment(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return outcome_schema(_call(wizard.start_payment, session_id), _calendar_url())


@router.post("/{session_id}/payment/confirm", response_model=WizardOutcomeSchema)
def confirm_payment(
    session_id: str,
    req: ConfirmPaymentSchema,
    wizard: BookingWizard = Depends(get_booking_wizard),
):
    return outcome_schema(_call(wizard.confirm_payment, session_id, req.payment_intent_id), _calendar_url())


@router.post("/{session_id}/payment/failure", response_model=WizardOutcomeSchema)
def payment_failure(
    session_id: str,
    req: PaymentFailureSchema,
    wizard: BookingWizard = Depends(get_booking_wizard),
):
    return outcome_schema(_call(wizard.record_payment_failure, session_id, req.message), _calendar_url())


@router.post("/{session_id}/scheduling/ack", response_model=WizardOutcomeSchema)
def acknowledge_scheduling(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return outcome_schema(_call(wizard.acknowledge_scheduling, session_id))


@router.post("/{session_id}/previous", response_model=WizardStateSchema)
def previous(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return state_schema(_call(wizard.previous, session_id), _calendar_url())


@router.post("/{session_id}/reset", response_model=WizardStateSchema)
def reset(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    return state_schema(_call(wizard.reset, session_id))


@router.get("/{session_id}/confirmation", response_model=CompletedBookingSchema)
def confirmation(session_id: str, wizard: BookingWizard = Depends(get_booking_wizard)):
    booking = _call(wizard.confirmation, session_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="No completed booking for this session")
    return completed_schema(booking)
