from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any

from app.application.ports.analytics_transport import AnalyticsPublisherPort
from app.domain.entities.analytics_event import AnalyticsEvent


def sanitize_form_data(form_data: dict[str, Any]) -> dict[str, Any]:
    """Strip contact details, keeping only presence and length metadata."""
    sanitized = dict(form_data)

    email = sanitized.pop("email", None)
    if isinstance(email, str) and email:
        sanitized["email_provided"] = True
        parts = email.split("@")
        if len(parts) > 1:
            sanitized["email_domain"] = parts[1]

    phone = sanitized.pop("phone", None)
    if isinstance(phone, str) and phone:
        sanitized["phone_provided"] = True
        sanitized["phone_length"] = len(phone)

    name = sanitized.pop("name", None)
    if isinstance(name, str) and name:
        sanitized["name_provided"] = True
        sanitized["name_length"] = len(name)

    address = sanitized.pop("address", None)
    if address:
        sanitized["address_provided"] = True

    for key, value in list(sanitized.items()):
        if isinstance(value, dict):
            sanitized[key] = sanitize_form_data(value)

    return sanitized


def new_session_id() -> str:
    return secrets.token_hex(8) + format(int(time.time() * 1000), "x")


class AnalyticsEmitter:
    def __init__(
        self,
        publisher: AnalyticsPublisherPort,
        session_id: str | None = None,
        debug: bool = False,
    ) -> None:
        self._publisher = publisher
        self._session_id = session_id
        self._debug = debug
        self._logger = logging.getLogger(__name__)

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            self._session_id = new_session_id()
        return self._session_id

    def for_session(self, session_id: str) -> "AnalyticsEmitter":
        """Emitter on the same publisher that tags events with `session_id`."""
        return AnalyticsEmitter(self._publisher, session_id=session_id, debug=self._debug)

    def track(self, event: AnalyticsEvent) -> None:
        """Publish an event. Never raises."""
        try:
            payload = {
                "event": event.event,
                "category": event.category,
                "action": event.action,
                "label": event.label,
                "value": event.value,
                "custom_data": event.custom_data,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "sessionId": self.session_id,
            }
            if self._debug:
                self._logger.info("Analytics event", extra={"event_type": event.event, "label": event.label})
            if not self._publisher.publish(payload):
                self._logger.debug("Analytics event dropped", extra={"event_type": event.event})
        except Exception as e:
            self._logger.warning("Analytics tracking failed", extra={"error": str(e)})

    def track_form_start(self, form_type: str, form_data: dict[str, Any] | None = None) -> None:
        self.track(AnalyticsEvent(
            event="form_start",
            category="forms",
            action="start",
            label=form_type,
            custom_data={"form_type": form_type, **(form_data or {})},
        ))

    def track_form_progress(self, form_type: str, step: int | str, total_steps: int | None = None) -> None:
        completion_rate = None
        if total_steps:
            completion_rate = step / total_steps if isinstance(step, int) else 0
        self.track(AnalyticsEvent(
            event="form_progress",
            category="forms",
            action="progress",
            label=form_type,
            value=step if isinstance(step, int) else None,
            custom_data={
                "form_type": form_type,
                "current_step": step,
                "total_steps": total_steps,
                "completion_rate": completion_rate,
            },
        ))

    def track_form_validation_error(self, form_type: str, field: str, error_type: str) -> None:
        self.track(AnalyticsEvent(
            event="form_validation_error",
            category="forms",
            action="validation_error",
            label=form_type,
            custom_data={"form_type": form_type, "field": field, "error_type": error_type},
        ))

    def track_form_submit(self, form_type: str, form_data: dict[str, Any]) -> None:
        self.track(AnalyticsEvent(
            event="form_submit",
            category="forms",
            action="submit",
            label=form_type,
            custom_data={"form_type": form_type, "form_data": sanitize_form_data(form_data)},
        ))

    def track_form_success(self, form_type: str, response_data: dict[str, Any] | None = None) -> None:
        self.track(AnalyticsEvent(
            event="form_success",
            category="conversions",
            action="submit_success",
            label=form_type,
            value=1,
            custom_data={"form_type": form_type, **(response_data or {})},
        ))

    def track_form_error(self, form_type: str, error: str) -> None:
        self.track(AnalyticsEvent(
            event="form_error",
            category="forms",
            action="submit_error",
            label=form_type,
            custom_data={"form_type": form_type, "error": error},
        ))

    def track_quote_start(self, quote_data: dict[str, Any]) -> None:
        self.track(AnalyticsEvent(
            event="quote_start",
            category="quotes",
            action="start",
            label="quote_calculator",
            custom_data={"service_type": quote_data.get("serviceType"), **quote_data},
        ))

    def track_quote_calculation(self, quote_data: dict[str, Any], estimated_price: int) -> None:
        self.track(AnalyticsEvent(
            event="quote_calculation",
            category="quotes",
            action="calculate",
            label="quote_calculator",
            value=estimated_price,
            custom_data={"estimated_price": estimated_price, **quote_data},
        ))

    def track_quote_conversion(self, quote_data: dict[str, Any], final_price: int) -> None:
        self.track(AnalyticsEvent(
            event="quote_conversion",
            category="conversions",
            action="quote_to_booking",
            label="quote_calculator",
            value=final_price,
            custom_data={"final_price": final_price, "conversion_value": final_price, **quote_data},
        ))

    def track_calculator_interaction(self, action: str, item_data: dict[str, Any] | None = None) -> None:
        self.track(AnalyticsEvent(
            event="calculator_interaction",
            category="calculator",
            action=action,
            label="item_calculator",
            custom_data=dict(item_data or {}),
        ))

    def track_calculator_conversion(self, selected_items: dict[str, int], total_price: int) -> None:
        self.track(AnalyticsEvent(
            event="calculator_conversion",
            category="conversions",
            action="calculator_to_booking",
            label="item_calculator",
            value=total_price,
            custom_data={
                "selected_items": dict(selected_items),
                "total_price": total_price,
                "item_count": sum(selected_items.values()),
            },
        ))

    def track_page_view(self, page: str, additional_data: dict[str, Any] | None = None) -> None:
        self.track(AnalyticsEvent(
            event="page_view",
            category="navigation",
            action="view",
            label=page,
            custom_data={"page": page, **(additional_data or {})},
        ))

    def track_cta_click(self, cta_type: str, location: str, destination: str | None = None) -> None:
        self.track(AnalyticsEvent(
            event="cta_click",
            category="engagement",
            action="click",
            label=cta_type,
            custom_data={"cta_type": cta_type, "location": location, "destination": destination},
        ))
