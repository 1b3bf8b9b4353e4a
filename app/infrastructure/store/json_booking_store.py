from __future__ import annotations

import json
import re
import threading
import time
from pathlib import Path
from typing import Any

from app.application.ports.booking_session_store import BookingSessionStorePort
from app.domain.entities.booking import (
    BookingDraft,
    CompletedBooking,
    CustomerDetails,
    PricingSelection,
    SelectedService,
    WizardState,
)
from app.domain.entities.postcode import PostcodeValidationResult
from app.domain.entities.service_option import ServiceOption


_SAFE_SESSION_ID = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class JsonBookingSessionStore(BookingSessionStorePort):
    """File-backed session store, one JSON document per booking session."""

    def __init__(self, data_dir: str = "./data/sessions") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()

    def _get_lock(self, session_id: str) -> threading.Lock:
        with self._lock_lock:
            if session_id not in self._locks:
                self._locks[session_id] = threading.Lock()
            return self._locks[session_id]

    def _get_file_path(self, session_id: str) -> Path:
        if not _SAFE_SESSION_ID.match(session_id):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self._data_dir / f"{session_id}.json"

    def _load(self, session_id: str) -> dict[str, Any]:
        file_path = self._get_file_path(session_id)
        if not file_path.exists():
            return {"session_id": session_id, "version": 1}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return {"session_id": session_id, "version": 1}

    def _save(self, session_id: str, data: dict[str, Any]) -> None:
        file_path = self._get_file_path(session_id)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _update(self, session_id: str, key: str, value: Any) -> None:
        with self._get_lock(session_id):
            data = self._load(session_id)
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
            self._save(session_id, data)

    def put_handoff(self, session_id: str, selection: PricingSelection) -> None:
        self._update(session_id, "handoff", self._serialize_selection(selection))

    def take_handoff(self, session_id: str) -> PricingSelection | None:
        with self._get_lock(session_id):
            data = self._load(session_id)
            raw = data.pop("handoff", None)
            if raw is None:
                return None
            self._save(session_id, data)
        return self._deserialize_selection(raw)

    def get_wizard(self, session_id: str) -> WizardState | None:
        raw = self._load(session_id).get("wizard")
        return self._deserialize_wizard(raw) if raw else None

    def set_wizard(self, session_id: str, state: WizardState) -> None:
        self._update(session_id, "wizard", self._serialize_wizard(state))

    def clear_wizard(self, session_id: str) -> None:
        self._update(session_id, "wizard", None)

    def put_pending(self, session_id: str, state: WizardState) -> None:
        self._update(session_id, "pending_booking", self._serialize_wizard(state))

    def get_pending(self, session_id: str) -> WizardState | None:
        raw = self._load(session_id).get("pending_booking")
        return self._deserialize_wizard(raw) if raw else None

    def clear_pending(self, session_id: str) -> None:
        self._update(session_id, "pending_booking", None)

    def put_completed(self, session_id: str, booking: CompletedBooking, ttl_seconds: float, now_ts: float | None = None) -> None:
        if now_ts is None:
            now_ts = time.time()
        self._update(
            session_id,
            "completed_booking",
            {"booking": self._serialize_completed(booking), "expires_at": now_ts + ttl_seconds},
        )

    def get_completed(self, session_id: str, now_ts: float | None = None) -> CompletedBooking | None:
        if now_ts is None:
            now_ts = time.time()
        raw = self._load(session_id).get("completed_booking")
        if not raw:
            return None
        if now_ts >= float(raw.get("expires_at") or 0):
            self.clear_completed(session_id)
            return None
        return self._deserialize_completed(raw.get("booking") or {})

    def clear_completed(self, session_id: str) -> None:
        self._update(session_id, "completed_booking", None)

    def _serialize_service(self, service: ServiceOption | None) -> dict[str, Any] | None:
        if service is None:
            return None
        return {
            "id": service.id,
            "name": service.name,
            "price": service.price,
            "description": service.description,
            "features": list(service.features),
        }

    def _deserialize_service(self, data: dict[str, Any] | None) -> ServiceOption | None:
        if not data:
            return None
        return ServiceOption(
            id=data.get("id", ""),
            name=data.get("name", ""),
            price=int(data.get("price") or 0),
            description=data.get("description", ""),
            features=tuple(data.get("features") or ()),
        )

    def _serialize_details(self, details: CustomerDetails) -> dict[str, Any]:
        return {
            "name": details.name,
            "email": details.email,
            "phone": details.phone,
            "address": details.address,
            "postcode": details.postcode,
            "specialInstructions": details.special_instructions,
        }

    def _deserialize_details(self, data: dict[str, Any]) -> CustomerDetails:
        return CustomerDetails(
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            postcode=data.get("postcode", ""),
            special_instructions=data.get("specialInstructions", ""),
        )

    def _serialize_selection(self, selection: PricingSelection | None) -> dict[str, Any] | None:
        if selection is None:
            return None
        selected_service = None
        if selection.selected_service:
            selected_service = {
                "service": selection.selected_service.service,
                "description": selection.selected_service.description,
                "features": list(selection.selected_service.features),
            }
        return {
            "pricingType": selection.pricing_type,
            "calculatedPrice": selection.calculated_price,
            "selectedService": selected_service,
            "selectedItems": dict(selection.selected_items),
        }

    def _deserialize_selection(self, data: dict[str, Any] | None) -> PricingSelection | None:
        if not data:
            return None
        selected_service = None
        raw_service = data.get("selectedService")
        if raw_service:
            selected_service = SelectedService(
                service=raw_service.get("service", ""),
                description=raw_service.get("description", ""),
                features=tuple(raw_service.get("features") or ()),
            )
        return PricingSelection(
            pricing_type=data.get("pricingType", "volume"),
            calculated_price=int(data.get("calculatedPrice") or 0),
            selected_service=selected_service,
            selected_items={k: int(v) for k, v in (data.get("selectedItems") or {}).items()},
        )

    def _serialize_wizard(self, state: WizardState) -> dict[str, Any]:
        postcode = None
        if state.postcode_validation:
            postcode = {
                "isValid": state.postcode_validation.is_valid,
                "message": state.postcode_validation.message,
                "type": state.postcode_validation.type,
                "area": state.postcode_validation.area,
            }
        return {
            "session_id": state.session_id,
            "step": state.step,
            "draft": {
                "service": self._serialize_service(state.draft.service),
                "date": state.draft.date,
                "timeSlot": state.draft.time_slot,
                "customerDetails": self._serialize_details(state.draft.customer_details),
            },
            "prefilledData": self._serialize_selection(state.prefilled_data),
            "postcodeValidation": postcode,
            "paymentIntentId": state.payment_intent_id,
            "paymentError": state.payment_error,
            "outOfArea": state.out_of_area,
            "updated_at": state.updated_at,
        }

    def _deserialize_wizard(self, data: dict[str, Any]) -> WizardState:
        draft_data = data.get("draft") or {}
        postcode = None
        raw_postcode = data.get("postcodeValidation")
        if raw_postcode:
            postcode = PostcodeValidationResult(
                is_valid=bool(raw_postcode.get("isValid")),
                message=raw_postcode.get("message", ""),
                type=raw_postcode.get("type", "info"),
                area=raw_postcode.get("area"),
            )
        return WizardState(
            session_id=data.get("session_id", ""),
            step=int(data.get("step") or 1),
            draft=BookingDraft(
                service=self._deserialize_service(draft_data.get("service")),
                date=draft_data.get("date"),
                time_slot=draft_data.get("timeSlot", ""),
                customer_details=self._deserialize_details(draft_data.get("customerDetails") or {}),
            ),
            prefilled_data=self._deserialize_selection(data.get("prefilledData")),
            postcode_validation=postcode,
            payment_intent_id=data.get("paymentIntentId"),
            payment_error=data.get("paymentError"),
            out_of_area=bool(data.get("outOfArea")),
            updated_at=data.get("updated_at"),
        )

    def _serialize_completed(self, booking: CompletedBooking) -> dict[str, Any]:
        return {
            "service": self._serialize_service(booking.service),
            "customerDetails": self._serialize_details(booking.customer_details),
            "prefilledData": self._serialize_selection(booking.prefilled_data),
            "completedAt": booking.completed_at,
            "paymentIntentId": booking.payment_intent_id,
        }

    def _deserialize_completed(self, data: dict[str, Any]) -> CompletedBooking:
        return CompletedBooking(
            service=self._deserialize_service(data.get("service")),
            customer_details=self._deserialize_details(data.get("customerDetails") or {}),
            prefilled_data=self._deserialize_selection(data.get("prefilledData")),
            completed_at=data.get("completedAt", ""),
            payment_intent_id=data.get("paymentIntentId"),
        )
