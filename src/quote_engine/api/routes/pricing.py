"""Price preview endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...models.domain import ServiceCatalog
from ...schemas.quotes import PricingRequest, PricingResponse
from ...services.pricing import price_quote
from ..dependencies import get_service_catalog

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("", response_model=PricingResponse, status_code=status.HTTP_200_OK)
def preview_price(
    payload: PricingRequest,
    catalog: ServiceCatalog = Depends(get_service_catalog),
) -> PricingResponse:
    selections = [service.to_domain() for service in payload.services]
    return PricingResponse.from_domain(price_quote(selections, catalog, payload.distance_km))
