"""
Tests for volume pricing, the per-item calculator and the quote estimator.
"""

import pytest

from app.application.exceptions import EmptySelectionError, UnknownServiceError
from app.application.use_cases.pricing import (
    ItemCalculator,
    catalog_item_calculator,
    estimate_quote,
    item_key,
    split_item_key,
    volume_price,
    volume_selection,
)
from app.infrastructure.catalog.service_catalog_store import ServiceCatalogStore


def test_volume_price_lookup():
    result = volume_price(ServiceCatalogStore(), "2-yard")
    assert result.price == 139
    assert "10 bin bags" in result.description


def test_volume_price_unknown_service():
    with pytest.raises(UnknownServiceError):
        volume_price(ServiceCatalogStore(), "9-yard")


def test_volume_selection_carries_service_details():
    selection = volume_selection(ServiceCatalogStore(), "2-yard")
    assert selection.pricing_type == "volume"
    assert selection.calculated_price == 139
    assert selection.selected_service.service == "2-Yard"


def test_minimum_charge_applies_to_small_selections():
    """One single mattress (£22) is lifted to the £65 minimum."""
    calc = ItemCalculator()
    calc.update_item_quantity("Single Mattress", 22, 1)
    assert calc.subtotal() == 22
    assert calc.calculate_total() == 65
    assert calc.minimum_applied()


def test_totals_above_minimum():
    calc = ItemCalculator()
    calc.update_item_quantity("3-Seater Sofa", 65, 1)
    calc.update_item_quantity("Bag of Junk", 12, 3)
    assert calc.calculate_total() == 101
    assert calc.selected_items_count() == 4
    assert calc.to_price_result().description == "4 items selected"
    assert not calc.minimum_applied()


def test_zero_quantity_removes_item():
    calc = ItemCalculator()
    calc.update_item_quantity("TV", 22, 2)
    assert calc.update_item_quantity("TV", 22, 0) == 2
    assert calc.selected_items == {}


def test_negative_quantity_rejected():
    with pytest.raises(ValueError):
        ItemCalculator().update_item_quantity("TV", 22, -1)


def test_empty_selection_cannot_be_booked():
    with pytest.raises(EmptySelectionError):
        ItemCalculator().to_selection()


def test_item_selection_hand_off():
    calc = ItemCalculator()
    calc.update_item_quantity("Cooker", 27, 2)
    selection = calc.to_selection()
    assert selection.pricing_type == "items"
    assert selection.calculated_price == 65
    assert selection.selected_items == {"Cooker_27": 2}


def test_clear():
    calc = ItemCalculator()
    calc.update_item_quantity("Cooker", 27, 2)
    calc.clear()
    assert calc.selected_items_count() == 0


def test_item_key_round_trip_with_underscores_in_name():
    assert split_item_key(item_key("Odd_Name", 10)) == ("Odd_Name", 10)


def test_quote_estimates():
    assert estimate_quote("residential", "small", "easy", "flexible") == 89
    assert estimate_quote("business", "large", "difficult", "same_day") == 1114
    # 79 * 1.8 * 1.2 * 1.3 = 221.832
    assert estimate_quote("garden", "medium", "moderate", "urgent") == 222


def test_quote_rounds_half_up():
    # 69 * 2.5 = 172.5
    assert estimate_quote("appliance", "large", "easy", "flexible") == 173


def test_quote_unknown_option():
    with pytest.raises(ValueError):
        estimate_quote("boat", "small", "easy", "flexible")


def test_catalog_calculator_uses_catalog_prices():
    calc = catalog_item_calculator(ServiceCatalogStore(), {"corner sofa_115": 1, "TV_22": 2})
    assert calc.selected_items == {"Corner Sofa_115": 1, "TV_22": 2}
    assert calc.calculate_total() == 159


def test_catalog_calculator_rejects_price_below_catalog():
    with pytest.raises(ValueError, match="Price mismatch"):
        catalog_item_calculator(ServiceCatalogStore(), {"Corner Sofa_1": 1})


def test_catalog_calculator_rejects_unknown_item():
    with pytest.raises(ValueError, match="Unknown item"):
        catalog_item_calculator(ServiceCatalogStore(), {"Grand Piano_5": 1})
