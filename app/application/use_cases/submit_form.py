from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from app.application.exceptions import FormRelayError
from app.application.ports.form_relay import FormRelayPort, UploadedFile
from app.application.use_cases.analytics import AnalyticsEmitter
from app.application.use_cases.pricing import estimate_quote
from app.application.utils.validation import (
    CONTACT_FORM_RULES,
    QUOTE_FORM_RULES,
    QUOTE_REQUEST_FORM_RULES,
    required,
    submit_form,
)
from app.domain.entities.validation import ValidationErrors, ValidationRules


ALLOWED_UPLOAD_TYPES = frozenset({
    "image/jpeg", "image/jpg", "image/png", "image/gif", "video/mp4", "video/quicktime",
})
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_UPLOADS = 20
MIN_UPLOADS = 5


@dataclass(frozen=True)
class FormOutcome:
    success: bool
    form_type: str
    quote_id: str | None = None
    estimated_price: int | None = None
    error: str | None = None
    validation_errors: ValidationErrors = field(default_factory=dict)


def new_quote_id() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "QUO-" + "".join(secrets.choice(alphabet) for _ in range(9))


def accepted_uploads(files: list[UploadedFile]) -> list[UploadedFile]:
    valid = [
        f for f in files
        if f.content_type in ALLOWED_UPLOAD_TYPES and len(f.content) <= MAX_UPLOAD_BYTES
    ]
    return valid[:MAX_UPLOADS]


class SubmitFormUseCase:
    """Validates a website form and forwards it to the form backend."""

    def __init__(self, relay: FormRelayPort, analytics: AnalyticsEmitter, fallback_message: str) -> None:
        self._relay = relay
        self._analytics = analytics
        self._fallback_message = fallback_message
        self._logger = logging.getLogger(__name__)

    def submit_contact(self, data: dict[str, Any], submitted_from: str = "Website") -> FormOutcome:
        def send(form: dict[str, Any]) -> None:
            self._relay.submit("contact-form-v2", {
                "name": _s(form.get("name")),
                "email": _s(form.get("email")),
                "phone": _s(form.get("phone")),
                "subject": _s(form.get("subject")),
                "message": _s(form.get("message")),
                **_provenance(submitted_from, "contact"),
            })

        return self._run("contact_form", data, CONTACT_FORM_RULES, send)

    def submit_quote(self, data: dict[str, Any], submitted_from: str = "Website") -> FormOutcome:
        estimated_price = None
        try:
            estimated_price = estimate_quote(
                _s(data.get("serviceType")),
                _s(data.get("volumeEstimate")),
                _s(data.get("accessibility")),
                _s(data.get("urgency")),
            )
        except ValueError:
            pass
        quote_id = new_quote_id()

        def send(form: dict[str, Any]) -> None:
            contact = form.get("contactInfo") or {}
            self._relay.submit("quote-form", {
                "serviceType": _s(form.get("serviceType")),
                "wasteType": _s(form.get("wasteType")),
                "volumeEstimate": _s(form.get("volumeEstimate")),
                "location": _s(form.get("location")),
                "accessibility": _s(form.get("accessibility")),
                "urgency": _s(form.get("urgency")),
                "contactName": _s(contact.get("name")),
                "contactEmail": _s(contact.get("email")),
                "contactPhone": _s(contact.get("phone")),
                "contactAddress": _s(contact.get("address")),
                "estimatedPrice": str(estimated_price or 0),
                "quoteId": quote_id,
                **_provenance(submitted_from, "quote"),
            })

        def on_submit() -> None:
            self._analytics.track_quote_conversion(
                {"service_type": data.get("serviceType"), "estimated_price": estimated_price, "contact_provided": True},
                estimated_price or 0,
            )

        outcome = self._run("quote_form", data, QUOTE_FORM_RULES, send, on_submit=on_submit, quote_id=quote_id)
        if outcome.success:
            return FormOutcome(success=True, form_type=outcome.form_type, quote_id=quote_id, estimated_price=estimated_price)
        return outcome

    def submit_quote_request(
        self,
        data: dict[str, Any],
        files: list[UploadedFile] | None = None,
        submitted_from: str = "Website",
    ) -> FormOutcome:
        uploads = accepted_uploads(files or [])
        clearance_type = _s(data.get("clearanceType"))

        rules: ValidationRules = dict(QUOTE_REQUEST_FORM_RULES)
        if clearance_type == "residential":
            rules["propertyType"] = required("Property type is required")
        if clearance_type == "business":
            rules["description"] = required("Description is required")

        form = dict(data)
        form["images"] = uploads
        rules["images"] = required("Please upload at least 5 images")
        if 0 < len(uploads) < MIN_UPLOADS:
            form["images"] = []

        def send(form: dict[str, Any]) -> None:
            self._relay.submit(
                "quote-request-form",
                {
                    "clearanceType": clearance_type,
                    "name": _s(form.get("name")),
                    "email": _s(form.get("email")),
                    "phone": _s(form.get("phone")),
                    "address": _s(form.get("address")),
                    "siteAddress": _s(form.get("siteAddress")),
                    "propertyType": _s(form.get("propertyType")),
                    "description": _s(form.get("description")),
                    **_provenance(submitted_from, "quote-request"),
                },
                files=uploads,
            )

        return self._run("quote_request_form", form, rules, send)

    def _run(
        self,
        form_type: str,
        data: dict[str, Any],
        rules: ValidationRules,
        send,
        on_submit=None,
        quote_id: str | None = None,
    ) -> FormOutcome:
        def submit(form: dict[str, Any]) -> None:
            self._analytics.track_form_submit(form_type, _trackable(form))
            try:
                send(form)
            except FormRelayError as e:
                self._logger.error("Form relay failed", extra={"form_name": form_type, "error": str(e)})
                raise FormRelayError(self._fallback_message) from e
            if on_submit:
                on_submit()

        result = submit_form(data, rules, submit)

        if result.success:
            response: dict[str, Any] = {}
            if quote_id:
                response["quote_id"] = quote_id
            self._analytics.track_form_success(form_type, response)
            return FormOutcome(success=True, form_type=form_type, quote_id=quote_id)

        if result.validation_errors:
            for field_name, field_errors in result.validation_errors.items():
                self._analytics.track_form_validation_error(form_type, field_name, field_errors[0])
            return FormOutcome(success=False, form_type=form_type, validation_errors=dict(result.validation_errors))

        error = result.error or self._fallback_message
        self._analytics.track_form_error(form_type, error)
        return FormOutcome(success=False, form_type=form_type, error=error)


def _s(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _provenance(submitted_from: str, form_type: str) -> dict[str, str]:
    return {
        "submitted-from": submitted_from,
        "submission-time": datetime.now(timezone.utc).isoformat(),
        "form-type": form_type,
    }


def _trackable(form: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in form.items() if k != "images"}
