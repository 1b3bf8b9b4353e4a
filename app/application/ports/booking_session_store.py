from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import CompletedBooking, PricingSelection, WizardState


class BookingSessionStorePort(ABC):
    """Transient per-session storage for the booking flow.

    Hand-offs are write-once by the pricing side and take-once by the wizard.
    """

    @abstractmethod
    def put_handoff(self, session_id: str, selection: PricingSelection) -> None:
        raise NotImplementedError

    @abstractmethod
    def take_handoff(self, session_id: str) -> PricingSelection | None:
        """Return and remove the pending hand-off."""
        raise NotImplementedError

    @abstractmethod
    def get_wizard(self, session_id: str) -> WizardState | None:
        raise NotImplementedError

    @abstractmethod
    def set_wizard(self, session_id: str, state: WizardState) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear_wizard(self, session_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def put_pending(self, session_id: str, state: WizardState) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_pending(self, session_id: str) -> WizardState | None:
        raise NotImplementedError

    @abstractmethod
    def clear_pending(self, session_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def put_completed(self, session_id: str, booking: CompletedBooking, ttl_seconds: float, now_ts: float | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_completed(self, session_id: str, now_ts: float | None = None) -> CompletedBooking | None:
        """Return the completed booking unless its TTL has passed."""
        raise NotImplementedError

    @abstractmethod
    def clear_completed(self, session_id: str) -> None:
        raise NotImplementedError
