from __future__ import annotations

import threading
import time

from app.application.ports.booking_session_store import BookingSessionStorePort
from app.domain.entities.booking import CompletedBooking, PricingSelection, WizardState


class MemoryBookingSessionStore(BookingSessionStorePort):
    def __init__(self) -> None:
        self._handoffs: dict[str, PricingSelection] = {}
        self._wizards: dict[str, WizardState] = {}
        self._pending: dict[str, WizardState] = {}
        self._completed: dict[str, tuple[CompletedBooking, float]] = {}
        self._lock = threading.Lock()

    def put_handoff(self, session_id: str, selection: PricingSelection) -> None:
        with self._lock:
            self._handoffs[session_id] = selection

    def take_handoff(self, session_id: str) -> PricingSelection | None:
        with self._lock:
            return self._handoffs.pop(session_id, None)

    def get_wizard(self, session_id: str) -> WizardState | None:
        return self._wizards.get(session_id)

    def set_wizard(self, session_id: str, state: WizardState) -> None:
        with self._lock:
            self._wizards[session_id] = state

    def clear_wizard(self, session_id: str) -> None:
        with self._lock:
            self._wizards.pop(session_id, None)

    def put_pending(self, session_id: str, state: WizardState) -> None:
        with self._lock:
            self._pending[session_id] = state

    def get_pending(self, session_id: str) -> WizardState | None:
        return self._pending.get(session_id)

    def clear_pending(self, session_id: str) -> None:
        with self._lock:
            self._pending.pop(session_id, None)

    def put_completed(self, session_id: str, booking: CompletedBooking, ttl_seconds: float, now_ts: float | None = None) -> None:
        if now_ts is None:
            now_ts = time.time()
        with self._lock:
            self._completed[session_id] = (booking, now_ts + ttl_seconds)

    def get_completed(self, session_id: str, now_ts: float | None = None) -> CompletedBooking | None:
        if now_ts is None:
            now_ts = time.time()
        with self._lock:
            entry = self._completed.get(session_id)
            if entry is None:
                return None
            booking, expires_at = entry
            if now_ts >= expires_at:
                del self._completed[session_id]
                return None
            return booking

    def clear_completed(self, session_id: str) -> None:
        with self._lock:
            self._completed.pop(session_id, None)
