from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.api.v1.schemas import PaymentIntentRequestSchema, PaymentIntentResponseSchema
from app.application.exceptions import PaymentError
from app.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from app.wiring.dependencies import get_create_payment_intent_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/create-payment-intent", response_model=PaymentIntentResponseSchema)
async def create_payment_intent(
    request: Request,
    uc: CreatePaymentIntentUseCase = Depends(get_create_payment_intent_use_case),
):
    body = await request.body()
    if not body:
        return JSONResponse(status_code=400, content={"error": "Request body is required"})

    try:
        req = PaymentIntentRequestSchema.model_validate(json.loads(body.decode("utf-8")))
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

    try:
        intent = await run_in_threadpool(uc.execute, req.amount, req.booking)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except PaymentError as e:
        logger.error("Error creating payment intent", extra={"error": str(e)})
        return JSONResponse(status_code=400, content={"error": str(e) or "Failed to create payment intent"})

    return PaymentIntentResponseSchema(client_secret=intent.client_secret, payment_intent_id=intent.id)
