"""Service catalog endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...data.catalog_repository import reload_catalog
from ...models.domain import ServiceCatalog
from ...schemas.quotes import ServiceModel
from ..dependencies import get_service_catalog

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=List[ServiceModel], status_code=status.HTTP_200_OK)
def list_services(catalog: ServiceCatalog = Depends(get_service_catalog)) -> List[ServiceModel]:
    return [ServiceModel.from_domain(entry) for entry in catalog]


@router.post("/reload", response_model=List[ServiceModel], status_code=status.HTTP_200_OK)
def reload_services() -> List[ServiceModel]:
    """Replace the cached catalog snapshot with a fresh load."""
    try:
        catalog = reload_catalog()
    except (FileNotFoundError, ValueError) as exc:
        logging.exception(f"Failed to reload service catalog: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to reload service catalog: {str(exc)}",
        ) from exc
    return [ServiceModel.from_domain(entry) for entry in catalog]
