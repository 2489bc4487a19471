"""Invoice request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Invoice, InvoiceStatus


class InvoiceModel(BaseModel):
    invoice_id: str
    invoice_number: str
    customer_email: str
    customer_name: str
    customer_phone: str = ""
    service_address: str = ""
    service_name: str = ""
    services: List[dict] = Field(default_factory=list)
    distance: float = Field(default=0.0, ge=0.0)
    subtotal: float = 0.0
    taxes: float = 0.0
    total_amount: float = 0.0
    status: InvoiceStatus = InvoiceStatus.PENDING
    payment_method: Optional[str] = None
    service_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_domain(self) -> Invoice:
        return Invoice(**self.model_dump())

    @classmethod
    def from_domain(cls, invoice: Invoice) -> "InvoiceModel":
        return cls(
            invoice_id=invoice.invoice_id,
            invoice_number=invoice.invoice_number,
            customer_email=invoice.customer_email,
            customer_name=invoice.customer_name,
            customer_phone=invoice.customer_phone,
            service_address=invoice.service_address,
            service_name=invoice.service_name,
            services=invoice.services,
            distance=invoice.distance,
            subtotal=invoice.subtotal,
            taxes=invoice.taxes,
            total_amount=invoice.total_amount,
            status=invoice.status,
            payment_method=invoice.payment_method,
            service_date=invoice.service_date,
            notes=invoice.notes,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus
