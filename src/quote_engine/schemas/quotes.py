"""Quoting request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    CustomerInfo,
    PriceBreakdown,
    QuoteStatus,
    SelectedOption,
    SelectedService,
    ServiceCatalogEntry,
    TimeSlot,
)


class SelectedOptionModel(BaseModel):
    option_index: int = Field(..., ge=0)
    quantity: int = Field(default=1, ge=1)


class SelectedServiceModel(BaseModel):
    service_id: str
    base_selected: bool = True
    options: List[SelectedOptionModel] = Field(default_factory=list)

    def to_domain(self) -> SelectedService:
        return SelectedService(
            service_id=self.service_id,
            base_selected=self.base_selected,
            options=tuple(SelectedOption(option_index=o.option_index, quantity=o.quantity) for o in self.options),
        )


class CustomerModel(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    vehicle_info: str = ""
    vehicle_vin: Optional[str] = None

    def to_domain(self) -> CustomerInfo:
        return CustomerInfo(
            name=self.name,
            email=self.email,
            phone=self.phone,
            address=self.address,
            vehicle_info=self.vehicle_info,
            vehicle_vin=self.vehicle_vin or None,
        )


class ServiceOptionModel(BaseModel):
    index: int
    name: str
    price: float


class ServiceModel(BaseModel):
    service_id: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    base_price: float
    duration_minutes: Optional[int] = None
    options: List[ServiceOptionModel]

    @classmethod
    def from_domain(cls, entry: ServiceCatalogEntry) -> "ServiceModel":
        return cls(
            service_id=entry.service_id,
            name=entry.name,
            category=entry.category,
            description=entry.description,
            base_price=entry.base_price,
            duration_minutes=entry.duration_minutes,
            options=[
                ServiceOptionModel(index=index, name=option.name, price=option.price)
                for index, option in enumerate(entry.options)
            ],
        )


class DistanceRequest(BaseModel):
    address: str = Field(..., description="Free-text customer address.")


class DistanceResponse(BaseModel):
    address: str
    distance_km: float
    source: str = Field(..., description="Tier that produced the figure (informational).")
    within_service_radius: bool


class TimeSlotModel(BaseModel):
    start: datetime
    end: datetime
    label: str
    available: bool

    @classmethod
    def from_domain(cls, slot: TimeSlot) -> "TimeSlotModel":
        return cls(start=slot.start, end=slot.end, label=slot.label, available=slot.available)


class SlotsResponse(BaseModel):
    day: date
    reason: str
    slots: List[TimeSlotModel]


class PricingRequest(BaseModel):
    services: List[SelectedServiceModel] = Field(default_factory=list)
    distance_km: float = Field(default=0.0, ge=0.0)


class PricingResponse(BaseModel):
    subtotal: float
    travel_cost: float
    taxes: float
    total: float

    @classmethod
    def from_domain(cls, breakdown: PriceBreakdown) -> "PricingResponse":
        rounded = breakdown.rounded()
        return cls(
            subtotal=rounded.subtotal,
            travel_cost=rounded.travel_cost,
            taxes=rounded.taxes,
            total=rounded.total,
        )


class QuoteRequest(BaseModel):
    customer: CustomerModel
    services: List[SelectedServiceModel] = Field(default_factory=list)
    preferred_date: Optional[date] = None
    time_slot: str = ""
    accepted_terms: bool = False
    notes: Optional[str] = None


class QuoteResponse(BaseModel):
    quote: dict
    warnings: List[str] = Field(default_factory=list)


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
