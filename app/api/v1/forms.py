from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.api.v1.schemas import (
    ContactFormSchema, FormRelayRequestSchema, FormSubmissionResponseSchema, QuoteFormSchema,
)
from app.application.ports.form_relay import UploadedFile
from app.application.use_cases.relay_form import RelayFormUseCase
from app.application.use_cases.submit_form import FormOutcome, SubmitFormUseCase
from app.wiring.dependencies import get_relay_form_use_case, get_submit_form_use_case


router = APIRouter()
logger = logging.getLogger(__name__)

QUOTE_REQUEST_FIELDS = (
    "clearanceType", "name", "email", "phone", "address", "siteAddress", "propertyType", "description",
)


@router.post("/relay")
async def relay_form(
    request: Request,
    uc: RelayFormUseCase = Depends(get_relay_form_use_case),
):
    try:
        req = FormRelayRequestSchema.model_validate_json(await request.body())
        return uc.execute(req.model_dump())
    except ValueError as e:
        logger.error("Form handler error", extra={"error": str(e)})
        return JSONResponse(status_code=500, content={"error": "Failed to process form submission"})


@router.post("/contact", response_model=FormSubmissionResponseSchema)
def submit_contact(
    req: ContactFormSchema,
    uc: SubmitFormUseCase = Depends(get_submit_form_use_case),
):
    return _respond(uc.submit_contact(req.model_dump()))


@router.post("/quote", response_model=FormSubmissionResponseSchema)
def submit_quote(
    req: QuoteFormSchema,
    uc: SubmitFormUseCase = Depends(get_submit_form_use_case),
):
    return _respond(uc.submit_quote(req.model_dump()))


@router.post("/quote-request", response_model=FormSubmissionResponseSchema)
async def submit_quote_request(
    request: Request,
    uc: SubmitFormUseCase = Depends(get_submit_form_use_case),
):
    form = await request.form()
    data: dict[str, Any] = {key: form.get(key) or "" for key in QUOTE_REQUEST_FIELDS}

    files: list[UploadedFile] = []
    for upload in form.getlist("images"):
        if isinstance(upload, UploadFile):
            files.append(UploadedFile(
                filename=upload.filename or "upload",
                content_type=upload.content_type or "application/octet-stream",
                content=await upload.read(),
            ))

    return _respond(await run_in_threadpool(uc.submit_quote_request, data, files))


def _respond(outcome: FormOutcome):
    if outcome.validation_errors:
        raise HTTPException(status_code=422, detail={"validation_errors": outcome.validation_errors})
    if not outcome.success:
        raise HTTPException(status_code=502, detail=outcome.error)
    return FormSubmissionResponseSchema(
        success=True,
        quote_id=outcome.quote_id,
        estimated_price=outcome.estimated_price,
    )
