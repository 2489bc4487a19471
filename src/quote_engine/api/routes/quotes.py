"""Quote submission endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...persistence.database import PersistenceError, QuoteRepository
from ...persistence.records import quote_to_record
from ...schemas.quotes import QuoteRequest, QuoteResponse, QuoteStatusUpdate
from ...services.quotes.errors import QuotePersistenceError, QuoteValidationError
from ...services.quotes.orchestrator import QuoteSubmissionService
from ...services.quotes.validation import QuoteSubmission
from ..dependencies import get_quote_repository, get_submission_service

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
async def submit_quote(
    payload: QuoteRequest,
    service: QuoteSubmissionService = Depends(get_submission_service),
) -> QuoteResponse:
    submission = QuoteSubmission(
        customer=payload.customer.to_domain(),
        services=tuple(selected.to_domain() for selected in payload.services),
        preferred_date=payload.preferred_date,
        time_slot=payload.time_slot,
        accepted_terms=payload.accepted_terms,
        notes=payload.notes,
    )
    try:
        result = await service.submit(submission)
    except QuoteValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "errors": exc.messages},
        ) from exc
    except QuotePersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return QuoteResponse(quote=quote_to_record(result.quote), warnings=result.warnings)


@router.get("", response_model=List[dict], status_code=status.HTTP_200_OK)
async def list_quotes(repository: QuoteRepository = Depends(get_quote_repository)) -> List[dict]:
    try:
        quotes = await repository.list()
    except PersistenceError as exc:
        logging.exception(f"Error listing quotes: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return [quote_to_record(quote) for quote in quotes]


@router.patch("/{quote_id}/status", response_model=dict, status_code=status.HTTP_200_OK)
async def update_quote_status(
    quote_id: str,
    payload: QuoteStatusUpdate,
    repository: QuoteRepository = Depends(get_quote_repository),
) -> dict:
    try:
        quote = await repository.update_status(quote_id, payload.status)
    except PersistenceError as exc:
        logging.exception(f"Error updating quote {quote_id}: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if quote is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Quote {quote_id} not found")
    return quote_to_record(quote)
