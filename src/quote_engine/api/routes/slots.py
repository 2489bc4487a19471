"""Appointment slot endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ...schemas.quotes import SlotsResponse, TimeSlotModel
from ...services.scheduling.slots import SlotAvailabilityEngine
from ..dependencies import get_slot_engine

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=SlotsResponse, status_code=status.HTTP_200_OK)
async def list_slots(
    day: date = Query(..., alias="date", description="Candidate date (YYYY-MM-DD)"),
    engine: SlotAvailabilityEngine = Depends(get_slot_engine),
) -> SlotsResponse:
    availability = await engine.availability(day)
    return SlotsResponse(
        day=availability.day,
        reason=availability.reason,
        slots=[TimeSlotModel.from_domain(slot) for slot in availability.slots],
    )
