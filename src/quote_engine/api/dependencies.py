"""Request-scoped collaborators for the API routes."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status

from ..data.catalog_repository import get_catalog
from ..models.domain import ServiceCatalog
from ..persistence.database import InvoiceRepository, QuoteRepository
from ..services.distance.resolver import DistanceResolver
from ..services.quotes.orchestrator import QuoteSubmissionService
from ..services.scheduling.slots import SlotAvailabilityEngine


def get_service_catalog() -> ServiceCatalog:
    try:
        return get_catalog()
    except (FileNotFoundError, ValueError) as exc:
        logging.exception(f"Service catalog unavailable: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Service catalog unavailable: {str(exc)}",
        ) from exc


def get_distance_resolver() -> DistanceResolver:
    return DistanceResolver()


def get_slot_engine() -> SlotAvailabilityEngine:
    return SlotAvailabilityEngine()


def get_quote_repository() -> QuoteRepository:
    return QuoteRepository()


def get_invoice_repository() -> InvoiceRepository:
    return InvoiceRepository()


def get_submission_service(
    catalog: ServiceCatalog = Depends(get_service_catalog),
    repository: QuoteRepository = Depends(get_quote_repository),
    resolver: DistanceResolver = Depends(get_distance_resolver),
    slot_engine: SlotAvailabilityEngine = Depends(get_slot_engine),
) -> QuoteSubmissionService:
    return QuoteSubmissionService(
        catalog=catalog,
        repository=repository,
        resolver=resolver,
        slot_engine=slot_engine,
    )
