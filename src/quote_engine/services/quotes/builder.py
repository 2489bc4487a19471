"""Assemble quote records and calendar appointments from a validated submission."""

from __future__ import annotations

from datetime import datetime, timezone

from ...config import settings
from ...models.domain import Quote, ServiceCatalog
from ..pricing import PricingRates, price_quote, service_line
from ..scheduling.calendar_client import Appointment
from .validation import QuoteSubmission


def new_quote_id(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"EST-{int(now.timestamp() * 1000)}"


def build_quote(
    submission: QuoteSubmission,
    catalog: ServiceCatalog,
    distance_km: float,
    start: datetime,
    rates: PricingRates | None = None,
    now: datetime | None = None,
) -> Quote:
    now = now or datetime.now(timezone.utc)
    lines = tuple(service_line(selection, catalog) for selection in submission.services)
    breakdown = price_quote(submission.services, catalog, distance_km, rates)
    return Quote(
        quote_id=new_quote_id(now),
        customer=submission.customer,
        services=lines,
        distance_km=distance_km,
        subtotal=breakdown.subtotal,
        travel_cost=breakdown.travel_cost,
        taxes=breakdown.taxes,
        total=breakdown.total,
        preferred_date=start.date(),
        time_slot=submission.time_slot,
        appointment_start=start,
        notes=submission.notes,
        created_at=now,
        updated_at=now,
    )


def describe_services(quote: Quote) -> str:
    parts = []
    for line in quote.services:
        base = f"{line.service_name} (base)" if line.base_selected else ""
        options = ", ".join(f"{option.name} x{option.quantity}" for option in line.options)
        parts.append(" + ".join(part for part in (base, options) if part))
    return ", ".join(part for part in parts if part)


def build_appointment(quote: Quote, duration_minutes: int | None = None) -> Appointment:
    description = f"Services: {describe_services(quote)}\n\nVehicle: {quote.customer.vehicle_info}"
    if quote.customer.vehicle_vin:
        description += f"\nVIN: {quote.customer.vehicle_vin}"
    description += f"\n\nEstimated total: {quote.total:.2f}$ {settings.currency}"
    return Appointment(
        title=f"Estimation - {quote.customer.name}",
        description=description,
        start=quote.appointment_start,
        duration_minutes=duration_minutes or settings.appointment_duration_minutes,
        attendee=quote.customer.email,
        attendee_name=quote.customer.name,
        location=quote.customer.address,
    )
