from __future__ import annotations

from app.domain.entities.service_option import PricedItem, ServiceOption


VOLUME_SERVICES: tuple[ServiceOption, ...] = (
    ServiceOption(
        id="single-item",
        name="Single Item",
        price=65,
        description="Perfect for individual items like mattress or washing machine",
        features=("Individual item collection", "Same day available", "DBS checked staff", "Fully insured"),
    ),
    ServiceOption(
        id="1-yard",
        name="1-Yard",
        price=99,
        description="Similar to 5 bin bags, washing machine, or wheelie bin",
        features=("Max Volume: 1 yd", "Max Weight: 50kg", "Max Labour: 10 minutes", "Fast collection"),
    ),
    ServiceOption(
        id="2-yard",
        name="2-Yard",
        price=139,
        description="Similar to 10 bin bags, 2-seater sofa, or 2 wheelie bins",
        features=("Max Volume: 2 yd", "Max Weight: 70kg", "Max Labour: 10 minutes", "Labour included"),
    ),
    ServiceOption(
        id="4-yard",
        name="4-Yard",
        price=199,
        description="Similar to 20 bin bags, 3-seater sofa + chair, or 4 wheelie bins",
        features=("Max Volume: 4 yd", "Max Weight: 300kg", "Max Labour: 30 minutes", "Professional team"),
    ),
    ServiceOption(
        id="7-yard",
        name="7-Yard",
        price=269,
        description="Similar to 35 bin bags, 7 wheelie bins, or 2 x 3-seater sofas + chair",
        features=("Max Volume: 7 yd", "Max Weight: 575kg", "Max Labour: 50 minutes", "DBS checked staff"),
    ),
)

ITEM_PRICES: tuple[PricedItem, ...] = (
    PricedItem("Armchair / Office Chair", 41, "Furniture & Beds"),
    PricedItem("2-Seater Sofa", 51, "Furniture & Beds"),
    PricedItem("3-Seater Sofa", 65, "Furniture & Beds"),
    PricedItem("Corner Sofa", 115, "Furniture & Beds"),
    PricedItem("Sofa Bed", 72, "Furniture & Beds"),
    PricedItem("Single Bed Base/Frame", 35, "Furniture & Beds"),
    PricedItem("Double/Kingsize Bed Base/Frame", 38, "Furniture & Beds"),
    PricedItem("Single Mattress", 22, "Furniture & Beds"),
    PricedItem("Double Mattress", 26, "Furniture & Beds"),
    PricedItem("Kingsize Mattress", 30, "Furniture & Beds"),
    PricedItem("Washing Machine / Dryer / Dishwasher", 27, "Appliances"),
    PricedItem("Cooker", 27, "Appliances"),
    PricedItem("Domestic Fridge/Freezer", 42, "Appliances"),
    PricedItem("TV", 22, "Appliances"),
    PricedItem("Bag of Junk", 12, "General Items"),
    PricedItem("Extra Labour (10 mins)", 20, "General Items"),
    PricedItem("Single Item Call Out Charge", 65, "Service Charges"),
)
