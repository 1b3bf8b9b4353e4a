from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import (
    HandoffRequestSchema, ItemSelectionSchema, ItemTotalResponseSchema,
    PostcodeResponseSchema, PricedItemSchema, PricingSelectionSchema,
    QuoteRequestSchema, QuoteResponseSchema, ServiceSchema,
)
from app.api.v1.serializers import selection_schema, service_schema
from app.application.exceptions import EmptySelectionError, UnknownServiceError
from app.application.ports.booking_session_store import BookingSessionStorePort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.analytics import AnalyticsEmitter
from app.application.use_cases.pricing import (
    ItemCalculator, catalog_item_calculator, estimate_quote, volume_selection,
)
from app.application.utils.postcode import validate_postcode
from app.core.config import settings
from app.wiring.dependencies import get_analytics, get_service_catalog, get_session_store

router = APIRouter()


def _calculator(catalog: ServiceCatalogPort, selected_items: dict[str, int]) -> ItemCalculator:
    return catalog_item_calculator(catalog, selected_items, minimum_charge=settings.MINIMUM_CHARGE)


@router.get("/pricing/services", response_model=list[ServiceSchema])
def list_services(catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    return [service_schema(s) for s in catalog.list_services()]


@router.get("/pricing/items", response_model=list[PricedItemSchema])
def list_items(catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    return [PricedItemSchema(name=i.name, price=i.price, category=i.category) for i in catalog.list_items()]


@router.post("/pricing/items/total", response_model=ItemTotalResponseSchema)
def items_total(
    req: ItemSelectionSchema,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    analytics: AnalyticsEmitter = Depends(get_analytics),
):
    try:
        calculator = _calculator(catalog, req.selected_items)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = calculator.to_price_result()
    analytics.track_calculator_interaction(
        "calculate_total",
        {"item_count": calculator.selected_items_count(), "total_price": result.price},
    )
    return ItemTotalResponseSchema(
        price=result.price,
        description=result.description,
        subtotal=calculator.subtotal(),
        minimum_applied=calculator.minimum_applied(),
        selected_items_count=calculator.selected_items_count(),
    )


@router.post("/pricing/quote", response_model=QuoteResponseSchema)
def quote(
    req: QuoteRequestSchema,
    analytics: AnalyticsEmitter = Depends(get_analytics),
):
    quote_data = {"serviceType": req.service_type, "volume": req.volume}
    analytics.track_quote_start(quote_data)
    try:
        price = estimate_quote(req.service_type, req.volume, req.accessibility, req.urgency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    analytics.track_quote_calculation(quote_data, price)
    return QuoteResponseSchema(estimated_price=price)


@router.get("/postcodes/{postcode}", response_model=PostcodeResponseSchema)
def check_postcode(postcode: str):
    result = validate_postcode(postcode)
    return PostcodeResponseSchema(
        postcode=postcode,
        is_valid=result.is_valid,
        message=result.message,
        type=result.type,
        area=result.area,
    )


@router.post("/pricing/handoff", response_model=PricingSelectionSchema)
def handoff(
    req: HandoffRequestSchema,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    store: BookingSessionStorePort = Depends(get_session_store),
    analytics: AnalyticsEmitter = Depends(get_analytics),
):
    try:
        if req.pricing_type == "volume":
            selection = volume_selection(catalog, req.service_id or "")
        elif req.pricing_type == "items":
            selection = _calculator(catalog, req.selected_items).to_selection()
        else:
            raise ValueError(f"Unknown pricing type: {req.pricing_type}")
        store.put_handoff(req.session_id, selection)
        analytics = analytics.for_session(req.session_id)
        if selection.pricing_type == "items":
            analytics.track_calculator_conversion(selection.selected_items, selection.calculated_price)
        else:
            analytics.track_cta_click("book_now", "pricing_page", "/booking")
    except UnknownServiceError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (EmptySelectionError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return selection_schema(selection)
