from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service_option import PricedItem, ServiceOption


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_services(self) -> list[ServiceOption]:
        """Volume tiers in display order."""
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: str) -> ServiceOption | None:
        """Get a volume tier by id or display name."""
        raise NotImplementedError

    @abstractmethod
    def list_items(self) -> list[PricedItem]:
        """Per-item price list in display order."""
        raise NotImplementedError

    @abstractmethod
    def get_item(self, name: str) -> PricedItem | None:
        raise NotImplementedError
