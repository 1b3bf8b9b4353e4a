from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.application.exceptions import EmptySelectionError, UnknownServiceError
from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.booking import PricingSelection, SelectedService


MINIMUM_CHARGE = 65

QUOTE_BASE_PRICES: dict[str, int] = {
    "residential": 89,
    "business": 199,
    "garden": 79,
    "appliance": 69,
    "furniture": 99,
}
VOLUME_MULTIPLIERS: dict[str, Decimal] = {
    "small": Decimal("1"),
    "medium": Decimal("1.8"),
    "large": Decimal("2.5"),
    "xlarge": Decimal("3.5"),
}
ACCESS_MULTIPLIERS: dict[str, Decimal] = {
    "easy": Decimal("1"),
    "moderate": Decimal("1.2"),
    "difficult": Decimal("1.4"),
}
URGENCY_MULTIPLIERS: dict[str, Decimal] = {
    "flexible": Decimal("1"),
    "urgent": Decimal("1.3"),
    "same_day": Decimal("1.6"),
}


@dataclass(frozen=True)
class PriceResult:
    price: int
    description: str


def item_key(name: str, price: int) -> str:
    return f"{name}_{price}"


def split_item_key(key: str) -> tuple[str, int]:
    name, _, price = key.rpartition("_")
    return name, int(price)


def volume_price(catalog: ServiceCatalogPort, service_id: str) -> PriceResult:
    service = catalog.get_service(service_id)
    if service is None:
        raise UnknownServiceError(f"Unknown service: {service_id}")
    return PriceResult(price=service.price, description=service.description)


def volume_selection(catalog: ServiceCatalogPort, service_id: str) -> PricingSelection:
    service = catalog.get_service(service_id)
    if service is None:
        raise UnknownServiceError(f"Unknown service: {service_id}")
    return PricingSelection(
        pricing_type="volume",
        calculated_price=service.price,
        selected_service=SelectedService(
            service=service.name,
            description=service.description,
            features=service.features,
        ),
    )


def estimate_quote(service_type: str, volume: str, accessibility: str, urgency: str) -> int:
    """Multiplier-based estimate used by the quote form, rounded to whole pounds."""
    try:
        base = QUOTE_BASE_PRICES[service_type]
        price = (
            Decimal(base)
            * VOLUME_MULTIPLIERS[volume]
            * ACCESS_MULTIPLIERS[accessibility]
            * URGENCY_MULTIPLIERS[urgency]
        )
    except KeyError as e:
        raise ValueError(f"Unknown quote option: {e.args[0]}") from e
    return int(price.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ItemCalculator:
    def __init__(self, minimum_charge: int = MINIMUM_CHARGE, selected_items: dict[str, int] | None = None) -> None:
        self._minimum_charge = minimum_charge
        self._selected: dict[str, int] = {k: v for k, v in (selected_items or {}).items() if v > 0}

    @property
    def selected_items(self) -> dict[str, int]:
        return dict(self._selected)

    def update_item_quantity(self, item_name: str, price: int, quantity: int) -> int:
        """Set the quantity for an item and return the previous quantity."""
        if quantity < 0:
            raise ValueError("quantity must be >= 0")
        key = item_key(item_name, price)
        old_quantity = self._selected.get(key, 0)
        if quantity == 0:
            self._selected.pop(key, None)
        else:
            self._selected[key] = quantity
        return old_quantity

    def subtotal(self) -> int:
        total = 0
        for key, quantity in self._selected.items():
            _, price = split_item_key(key)
            total += price * quantity
        return total

    def calculate_total(self) -> int:
        return max(self.subtotal(), self._minimum_charge)

    def minimum_applied(self) -> bool:
        return self.selected_items_count() > 0 and self.subtotal() < self._minimum_charge

    def selected_items_count(self) -> int:
        return sum(self._selected.values())

    def clear(self) -> None:
        self._selected.clear()

    def to_price_result(self) -> PriceResult:
        return PriceResult(
            price=self.calculate_total(),
            description=f"{self.selected_items_count()} items selected",
        )

    def to_selection(self) -> PricingSelection:
        if self.selected_items_count() == 0:
            raise EmptySelectionError("Select at least one item before booking")
        return PricingSelection(
            pricing_type="items",
            calculated_price=self.calculate_total(),
            selected_items=self.selected_items,
        )


def catalog_item_calculator(
    catalog: ServiceCatalogPort,
    selected_items: dict[str, int],
    minimum_charge: int = MINIMUM_CHARGE,
) -> ItemCalculator:
    """Build a calculator from `name_price` keys, pricing each item from the catalog.

    Raises ValueError when a name is not in the catalog or the key's price
    differs from the catalog price.
    """
    calculator = ItemCalculator(minimum_charge=minimum_charge)
    for key, quantity in selected_items.items():
        name, price = split_item_key(key)
        item = catalog.get_item(name)
        if item is None:
            raise ValueError(f"Unknown item: {name}")
        if price != item.price:
            raise ValueError(f"Price mismatch for {item.name}: expected {item.price}")
        calculator.update_item_quantity(item.name, item.price, quantity)
    return calculator
