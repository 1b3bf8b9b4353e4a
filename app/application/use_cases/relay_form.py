from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class FormNotification:
    subject: str
    body: str
    recipient: str


def _v(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    return str(value) if value else default


def compose_notification(form_name: str, data: dict[str, Any], submitted_at: str, recipient: str) -> FormNotification:
    if form_name == "contact-form-v2":
        subject = f"New Contact Form Submission - {_v(data, 'subject', 'General Inquiry')}"
        body = "\n".join([
            "New contact form submission received:",
            "",
            f"Name: {_v(data, 'name', 'Not provided')}",
            f"Email: {_v(data, 'email', 'Not provided')}",
            f"Phone: {_v(data, 'phone', 'Not provided')}",
            f"Subject: {_v(data, 'subject', 'Not provided')}",
            f"Message: {_v(data, 'message', 'Not provided')}",
            "",
            f"Submitted: {submitted_at}",
            f"From: {_v(data, 'submitted-from', 'Website')}",
            f"Form Type: {_v(data, 'form-type', 'Contact')}",
        ])
    elif form_name == "quote-form":
        subject = f"New Quote Request - {_v(data, 'serviceType', 'Unknown Service')}"
        body = "\n".join([
            "New quote request received:",
            "",
            f"Service Type: {_v(data, 'serviceType', 'Not specified')}",
            f"Waste Type: {_v(data, 'wasteType', 'Not specified')}",
            f"Volume: {_v(data, 'volumeEstimate', 'Not specified')}",
            f"Location: {_v(data, 'contactAddress', 'Not provided')}",
            f"Accessibility: {_v(data, 'accessibility', 'Not specified')}",
            f"Urgency: {_v(data, 'urgency', 'Not specified')}",
            f"Contact Email: {_v(data, 'contactEmail', 'Not provided')}",
            f"Quote ID: {_v(data, 'quoteId', 'Not generated')}",
            "",
            f"Submitted: {submitted_at}",
        ])
    elif form_name == "quote-request-form":
        subject = f"New Large Job Quote Request - {_v(data, 'propertyType', 'Property')}"
        body = "\n".join([
            "New large job quote request received:",
            "",
            f"Name: {_v(data, 'name', 'Not provided')}",
            f"Phone: {_v(data, 'phone', 'Not provided')}",
            f"Property Type: {_v(data, 'propertyType', 'Not specified')}",
            f"Site Address: {_v(data, 'siteAddress', 'Not provided')}",
            "",
            f"Files Attached: {'Yes' if data.get('file') else 'No'}",
            "",
            f"Submitted: {submitted_at}",
            f"From: {_v(data, 'submitted-from', 'Website')}",
        ])
    else:
        subject = f"New {form_name} submission"
        body = "\n".join(
            [f"New {form_name} submission received:", ""]
            + [f"{key}: {value}" for key, value in data.items()]
            + ["", f"Submitted: {submitted_at}"]
        )
    return FormNotification(subject=subject, body=body, recipient=recipient)


class RelayFormUseCase:
    """Receives form-backend notifications and logs the e-mail that would be sent."""

    def __init__(self, recipient: str) -> None:
        self._recipient = recipient
        self._logger = logging.getLogger(__name__)

    def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        form_name = payload.get("form_name")
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ValueError("Form data must be an object")

        submitted_at = datetime.now(timezone.utc).isoformat()
        self._logger.info("Form submission received", extra={"form_name": form_name, "field_count": len(data)})

        notification = compose_notification(str(form_name), data, submitted_at, self._recipient)
        self._logger.info(
            "Form notification composed",
            extra={"form_name": form_name, "subject": notification.subject, "recipient": notification.recipient},
        )
        return {
            "message": "Form submission processed",
            "formName": form_name,
            "submittedAt": submitted_at,
        }
