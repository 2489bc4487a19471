"""Conversion between domain objects and flat storage records."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from ..models.domain import (
    CustomerInfo,
    Invoice,
    InvoiceStatus,
    Quote,
    QuoteOptionLine,
    QuoteServiceLine,
    QuoteStatus,
)


def _money(value: float) -> float:
    return round(float(value), 2)


def service_line_to_record(line: QuoteServiceLine) -> dict[str, Any]:
    return {
        "service_id": line.service_id,
        "service_name": line.service_name,
        "base_price": _money(line.base_price),
        "base_selected": line.base_selected,
        "options": [
            {
                "name": option.name,
                "price": _money(option.price),
                "quantity": option.quantity,
                "total": _money(option.total),
            }
            for option in line.options
        ],
        "total_price": _money(line.total_price),
    }


def quote_to_record(quote: Quote) -> dict[str, Any]:
    """Flatten a quote; monetary values are rounded to 2 decimals here."""
    return {
        "quote_id": quote.quote_id,
        "customer_name": quote.customer.name,
        "customer_email": quote.customer.email,
        "customer_phone": quote.customer.phone,
        "customer_address": quote.customer.address,
        "vehicle_info": quote.customer.vehicle_info,
        "vehicle_vin": quote.customer.vehicle_vin,
        "services": [service_line_to_record(line) for line in quote.services],
        "distance": _money(quote.distance_km),
        "subtotal": _money(quote.subtotal),
        "travel_cost": _money(quote.travel_cost),
        "taxes": _money(quote.taxes),
        "total": _money(quote.total),
        "preferred_date": quote.preferred_date.isoformat(),
        "time_slot": quote.time_slot,
        "appointment_start": quote.appointment_start.isoformat(),
        "notes": quote.notes,
        "status": quote.status.value,
        "created_at": quote.created_at.isoformat(),
        "updated_at": quote.updated_at.isoformat(),
    }


def quote_from_record(record: dict[str, Any]) -> Quote:
    services = tuple(
        QuoteServiceLine(
            service_id=line["service_id"],
            service_name=line.get("service_name", ""),
            base_price=float(line.get("base_price", 0)),
            base_selected=bool(line.get("base_selected", False)),
            options=tuple(
                QuoteOptionLine(
                    name=option.get("name", ""),
                    price=float(option.get("price", 0)),
                    quantity=int(option.get("quantity", 1)),
                    total=float(option.get("total", 0)),
                )
                for option in line.get("options", [])
            ),
            total_price=float(line.get("total_price", 0)),
        )
        for line in record.get("services", [])
    )
    return Quote(
        quote_id=record["quote_id"],
        customer=CustomerInfo(
            name=record["customer_name"],
            email=record["customer_email"],
            phone=record["customer_phone"],
            address=record["customer_address"],
            vehicle_info=record.get("vehicle_info", ""),
            vehicle_vin=record.get("vehicle_vin"),
        ),
        services=services,
        distance_km=float(record["distance"]),
        subtotal=float(record["subtotal"]),
        travel_cost=float(record["travel_cost"]),
        taxes=float(record["taxes"]),
        total=float(record["total"]),
        preferred_date=date.fromisoformat(str(record["preferred_date"])[:10]),
        time_slot=record["time_slot"],
        appointment_start=datetime.fromisoformat(record["appointment_start"]),
        notes=record.get("notes"),
        status=QuoteStatus(record.get("status", QuoteStatus.PENDING.value)),
        created_at=datetime.fromisoformat(record["created_at"]),
        updated_at=datetime.fromisoformat(record["updated_at"]),
    )


def invoice_to_record(invoice: Invoice) -> dict[str, Any]:
    record = asdict(invoice)
    record["status"] = invoice.status.value
    return record


def invoice_from_record(record: dict[str, Any]) -> Invoice:
    fields = set(Invoice.__dataclass_fields__)
    values = {key: value for key, value in record.items() if key in fields}
    values["status"] = InvoiceStatus(values.get("status", InvoiceStatus.PENDING.value))
    values.setdefault("services", [])
    return Invoice(**values)
