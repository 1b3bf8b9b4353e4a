from __future__ import annotations

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_option import PricedItem, ServiceOption
from app.infrastructure.catalog.service_catalog_data import ITEM_PRICES, VOLUME_SERVICES


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(
        self,
        services: tuple[ServiceOption, ...] | None = None,
        items: tuple[PricedItem, ...] | None = None,
    ) -> None:
        self._services = services or VOLUME_SERVICES
        self._items = items or ITEM_PRICES

    def list_services(self) -> list[ServiceOption]:
        return list(self._services)

    def get_service(self, service_id: str) -> ServiceOption | None:
        normalized = service_id.lower().strip()
        for service in self._services:
            if service.id == normalized or service.name.lower() == normalized:
                return service
        return None

    def list_items(self) -> list[PricedItem]:
        return list(self._items)

    def get_item(self, name: str) -> PricedItem | None:
        normalized = name.lower().strip()
        for item in self._items:
            if item.name.lower() == normalized:
                return item
        return None
