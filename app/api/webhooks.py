from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.application.exceptions import PaymentConfigurationError, WebhookSignatureError
from app.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from app.wiring.dependencies import get_payment_webhook_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    uc: HandlePaymentWebhookUseCase = Depends(get_payment_webhook_use_case),
) -> JSONResponse:
    body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    if not body or not signature:
        return JSONResponse(status_code=400, content={"error": "Missing body or signature"})

    try:
        event = uc.verify(body, signature)
    except WebhookSignatureError as e:
        logger.warning("Webhook signature verification failed", extra={"error": str(e)})
        return JSONResponse(status_code=400, content={"error": "Webhook signature verification failed"})
    except PaymentConfigurationError as e:
        logger.error("Webhook verification not configured", extra={"error": str(e)})
        return JSONResponse(status_code=500, content={"error": "Webhook verification is not configured"})

    try:
        uc.handle(event)
    except Exception as e:
        logger.exception("Webhook handler error", extra={"event_type": event.type, "error": str(e)})
        return JSONResponse(status_code=400, content={"error": "Webhook handler failed"})

    return JSONResponse(status_code=200, content={"received": True})
