"""Distance estimation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...schemas.quotes import DistanceRequest, DistanceResponse
from ...services.distance.resolver import DistanceResolver
from ..dependencies import get_distance_resolver

router = APIRouter(prefix="/distance", tags=["distance"])


@router.post("", response_model=DistanceResponse, status_code=status.HTTP_200_OK)
async def estimate_distance(
    payload: DistanceRequest,
    resolver: DistanceResolver = Depends(get_distance_resolver),
) -> DistanceResponse:
    estimate = await resolver.resolve(payload.address)
    return DistanceResponse(
        address=payload.address,
        distance_km=estimate.distance_km,
        source=estimate.source,
        within_service_radius=estimate.distance_km <= settings.max_service_radius_km,
    )
