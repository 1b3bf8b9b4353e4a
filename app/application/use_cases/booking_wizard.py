from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable

from app.application.exceptions import PaymentError, UnknownServiceError, WizardTransitionError
from app.application.ports.booking_session_store import BookingSessionStorePort
from app.application.ports.payment_gateway import PaymentGatewayPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.analytics import AnalyticsEmitter
from app.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase, booking_payload
from app.application.utils.postcode import validate_postcode
from app.application.utils.validation import BOOKING_DETAILS_RULES, validate_form
from app.domain.entities.booking import CompletedBooking, CustomerDetails, PricingSelection, WizardState
from app.domain.entities.service_option import ServiceOption
from app.domain.entities.validation import ValidationErrors
from app.domain.entities.wizard_step import WizardStep


FLOW_NAME = "booking_flow"
TOTAL_STEPS = len(WizardStep)
CONFIRMATION_PATH = "/booking-confirmation"
SCHEDULING_PATH = "/booking-scheduling"
OUT_OF_AREA_LINKS = ("/quote-selection", "/service-areas")
OUT_OF_AREA_ALERT = (
    "Sorry, we don't provide online bookings in this postcode area. "
    "Please use our quote form instead."
)
PAYMENT_RETRY_MESSAGE = "Payment could not be completed. Please try again."
PAYMENT_MISMATCH_MESSAGE = "Payment does not match the booking total. Please try again."
ITEM_SELECTION_FEATURES = ("Individual item pricing", "Custom selection", "Transparent pricing")
COMPLETED_BOOKING_TTL_SECONDS = 60.0


@dataclass(frozen=True)
class WizardOutcome:
    state: WizardState
    errors: ValidationErrors = field(default_factory=dict)
    message: str | None = None
    alternate_links: tuple[str, ...] = ()
    client_secret: str | None = None
    redirect: str | None = None


def service_from_selection(selection: PricingSelection) -> ServiceOption | None:
    """Turn a pricing hand-off into the service the wizard books."""
    if selection.pricing_type == "volume" and selection.selected_service:
        chosen = selection.selected_service
        return ServiceOption(
            id=chosen.service.lower().replace(" ", "-", 1),
            name=chosen.service,
            price=selection.calculated_price,
            description=chosen.description,
            features=tuple(chosen.features),
        )
    if selection.pricing_type == "items" and selection.selected_items:
        count = sum(selection.selected_items.values())
        return ServiceOption(
            id="custom-items",
            name="Custom Item Selection",
            price=selection.calculated_price,
            description=f"{count} items selected",
            features=ITEM_SELECTION_FEATURES,
        )
    return None


class BookingWizard:
    """Five-step booking flow: service, details, payment, scheduling, confirmation.

    Working state lives in the session store between calls, so every method
    takes the session id and returns the state it persisted.
    """

    def __init__(
        self,
        store: BookingSessionStorePort,
        catalog: ServiceCatalogPort,
        payments: CreatePaymentIntentUseCase,
        gateway: PaymentGatewayPort,
        analytics: AnalyticsEmitter,
        completed_ttl_seconds: float = COMPLETED_BOOKING_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._payments = payments
        self._gateway = gateway
        self._analytics = analytics
        self._completed_ttl_seconds = completed_ttl_seconds
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def start(self, session_id: str) -> WizardState:
        selection = self._store.take_handoff(session_id)
        existing = self._store.get_wizard(session_id)

        if selection is None and existing is not None:
            return existing

        state = WizardState(session_id=session_id)
        if selection is not None:
            service = service_from_selection(selection)
            state = replace(
                state,
                prefilled_data=selection,
                draft=replace(state.draft, service=service),
                step=WizardStep.CUSTOMER_DETAILS if service else WizardStep.SERVICE_SELECTION,
            )

        self._analytics.track_form_start(FLOW_NAME)
        self._logger.info(
            "Booking started",
            extra={"session_id": session_id, "step": int(state.step), "prefilled": selection is not None},
        )
        return self._save(state)

    def get(self, session_id: str) -> WizardState:
        return self._load(session_id)

    def select_service(self, session_id: str, service_id: str) -> WizardState:
        state = self._load(session_id)
        self._require_step(state, WizardStep.SERVICE_SELECTION)

        service = self._catalog.get_service(service_id)
        if service is None:
            raise UnknownServiceError(f"Unknown service: {service_id}")

        state = replace(state, draft=replace(state.draft, service=service), step=WizardStep.CUSTOMER_DETAILS)
        self._analytics.track_form_progress(FLOW_NAME, int(WizardStep.CUSTOMER_DETAILS), TOTAL_STEPS)
        return self._save(state)

    def update_customer_details(self, session_id: str, **changes: str) -> WizardState:
        state = self._load(session_id)
        self._require_step(state, WizardStep.CUSTOMER_DETAILS)

        known = set(asdict(CustomerDetails()))
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown customer detail(s): {', '.join(sorted(unknown))}")

        details = replace(state.draft.customer_details, **changes)
        state = replace(state, draft=replace(state.draft, customer_details=details))

        if "postcode" in changes:
            postcode = changes["postcode"] or ""
            verdict = validate_postcode(postcode) if len(postcode.strip()) >= 3 else None
            state = replace(state, postcode_validation=verdict, out_of_area=False)

        return self._save(state)

    def submit_customer_details(self, session_id: str) -> WizardOutcome:
        state = self._load(session_id)
        self._require_step(state, WizardStep.CUSTOMER_DETAILS)
        if state.draft.service is None:
            raise WizardTransitionError("Select a service before entering your details")

        result = validate_form(asdict(state.draft.customer_details), BOOKING_DETAILS_RULES)
        if not result.is_valid:
            for field_name, field_errors in result.errors.items():
                self._analytics.track_form_validation_error(FLOW_NAME, field_name, field_errors[0])
            return WizardOutcome(state=state, errors=result.errors)

        verdict = validate_postcode(state.draft.customer_details.postcode)
        if not verdict.is_valid:
            state = self._save(replace(state, postcode_validation=verdict, out_of_area=True))
            self._logger.info(
                "Postcode outside booking area",
                extra={"session_id": session_id, "postcode": state.draft.customer_details.postcode},
            )
            return WizardOutcome(state=state, message=OUT_OF_AREA_ALERT, alternate_links=OUT_OF_AREA_LINKS)

        state = replace(state, postcode_validation=verdict, out_of_area=False, step=WizardStep.PAYMENT)
        state = self._save(state)
        self._store.put_pending(session_id, state)
        self._analytics.track_form_progress(FLOW_NAME, int(WizardStep.PAYMENT), TOTAL_STEPS)
        return WizardOutcome(state=state)

    def start_payment(self, session_id: str) -> WizardOutcome:
        state = self._load(session_id)
        self._require_step(state, WizardStep.PAYMENT)
        service = state.draft.service
        if service is None:
            raise WizardTransitionError("No service selected")

        try:
            intent = self._payments.execute(service.price * 100, booking_payload(state.draft))
        except (ValueError, PaymentError) as e:
            message = str(e) or PAYMENT_RETRY_MESSAGE
            self._logger.warning("Payment intent failed", extra={"session_id": session_id, "error": message})
            state = self._save(replace(state, payment_error=message))
            return WizardOutcome(state=state, message=message)

        state = self._save(replace(state, payment_intent_id=intent.id, payment_error=None))
        return WizardOutcome(state=state, client_secret=intent.client_secret)

    def confirm_payment(self, session_id: str, payment_intent_id: str) -> WizardOutcome:
        state = self._load(session_id)
        self._require_step(state, WizardStep.PAYMENT)
        if not state.payment_intent_id:
            raise WizardTransitionError("Start the payment before confirming it")
        if payment_intent_id != state.payment_intent_id:
            raise WizardTransitionError("Payment does not belong to this booking")
        service = state.draft.service
        if service is None:
            raise WizardTransitionError("No service selected")

        try:
            intent = self._gateway.retrieve_payment_intent(payment_intent_id)
        except PaymentError as e:
            return self._payment_failed(state, str(e))

        # The intent must cover the booked service exactly.
        if intent.amount != service.price * 100 or intent.currency.lower() != self._payments.currency.lower():
            self._logger.warning(
                "Payment amount mismatch",
                extra={"session_id": session_id, "payment_intent_id": intent.id, "amount_paid": intent.amount},
            )
            return self._payment_failed(state, PAYMENT_MISMATCH_MESSAGE)

        if intent.status != "succeeded":
            return self._payment_failed(state, intent.last_payment_error)

        state = replace(state, payment_intent_id=intent.id, payment_error=None, step=WizardStep.SCHEDULING)
        state = self._save(state)
        self._store.put_pending(session_id, state)
        self._analytics.track_cta_click("payment_completed", "payment_success", SCHEDULING_PATH)
        self._logger.info(
            "Payment confirmed",
            extra={"session_id": session_id, "payment_intent_id": intent.id},
        )
        return WizardOutcome(state=state)

    def record_payment_failure(self, session_id: str, message: str | None = None) -> WizardOutcome:
        state = self._load(session_id)
        self._require_step(state, WizardStep.PAYMENT)
        return self._payment_failed(state, message)

    def acknowledge_scheduling(self, session_id: str) -> WizardOutcome:
        state = self._load(session_id)
        self._require_step(state, WizardStep.SCHEDULING)

        booking = CompletedBooking(
            service=state.draft.service,
            customer_details=state.draft.customer_details,
            prefilled_data=state.prefilled_data,
            completed_at=datetime.now(timezone.utc).isoformat(),
            payment_intent_id=state.payment_intent_id,
        )
        self._store.put_completed(session_id, booking, self._completed_ttl_seconds, now_ts=self._clock())
        self._store.clear_pending(session_id)
        self._store.clear_wizard(session_id)

        self._analytics.track_form_success(FLOW_NAME, {"amount_paid": booking.amount_paid})
        self._logger.info("Booking completed", extra={"session_id": session_id, "step": int(WizardStep.CONFIRMATION)})
        return WizardOutcome(
            state=replace(state, step=WizardStep.CONFIRMATION, updated_at=self._clock()),
            redirect=CONFIRMATION_PATH,
        )

    def previous(self, session_id: str) -> WizardState:
        state = self._load(session_id)
        if not WizardStep.CUSTOMER_DETAILS <= state.step <= WizardStep.SCHEDULING:
            raise WizardTransitionError(f"Cannot go back from step {int(state.step)}")
        return self._save(replace(state, step=WizardStep(state.step - 1)))

    def reset(self, session_id: str) -> WizardState:
        self._store.clear_pending(session_id)
        self._store.clear_completed(session_id)
        return self._save(WizardState(session_id=session_id))

    def confirmation(self, session_id: str) -> CompletedBooking | None:
        return self._store.get_completed(session_id, now_ts=self._clock())

    def _payment_failed(self, state: WizardState, message: str | None) -> WizardOutcome:
        message = message or PAYMENT_RETRY_MESSAGE
        self._logger.warning("Payment failed", extra={"session_id": state.session_id, "error": message})
        state = self._save(replace(state, payment_error=message))
        return WizardOutcome(state=state, message=message)

    def _load(self, session_id: str) -> WizardState:
        state = self._store.get_wizard(session_id)
        if state is None:
            raise WizardTransitionError("No booking in progress for this session")
        return state

    def _save(self, state: WizardState) -> WizardState:
        state = replace(state, updated_at=self._clock())
        self._store.set_wizard(state.session_id, state)
        return state

    @staticmethod
    def _require_step(state: WizardState, expected: WizardStep) -> None:
        if state.step != expected:
            raise WizardTransitionError(
                f"Expected step {int(expected)}, booking is on step {int(state.step)}"
            )
