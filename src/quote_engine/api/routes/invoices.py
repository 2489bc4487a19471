"""Invoice endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...persistence.database import InvoiceRepository, PersistenceError
from ...schemas.invoices import InvoiceModel, InvoiceStatusUpdate
from ..dependencies import get_invoice_repository

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _storage_error(action: str, exc: Exception) -> HTTPException:
    logging.exception(f"Error {action}: {exc}")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed {action}: {str(exc)}")


@router.get("", response_model=List[InvoiceModel], status_code=status.HTTP_200_OK)
async def list_invoices(repository: InvoiceRepository = Depends(get_invoice_repository)) -> List[InvoiceModel]:
    try:
        return [InvoiceModel.from_domain(invoice) for invoice in await repository.list()]
    except PersistenceError as exc:
        raise _storage_error("listing invoices", exc) from exc


@router.get("/search", response_model=List[InvoiceModel], status_code=status.HTTP_200_OK)
async def search_invoices(
    q: str = Query(..., min_length=1, description="Email, phone, invoice number or id fragment"),
    repository: InvoiceRepository = Depends(get_invoice_repository),
) -> List[InvoiceModel]:
    try:
        return [InvoiceModel.from_domain(invoice) for invoice in await repository.search(q)]
    except PersistenceError as exc:
        raise _storage_error("searching invoices", exc) from exc


@router.get("/by-email", response_model=List[InvoiceModel], status_code=status.HTTP_200_OK)
async def invoices_by_email(
    email: str = Query(..., min_length=1),
    repository: InvoiceRepository = Depends(get_invoice_repository),
) -> List[InvoiceModel]:
    try:
        return [InvoiceModel.from_domain(invoice) for invoice in await repository.by_email(email)]
    except PersistenceError as exc:
        raise _storage_error("looking up invoices", exc) from exc


@router.post("", response_model=InvoiceModel, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceModel,
    repository: InvoiceRepository = Depends(get_invoice_repository),
) -> InvoiceModel:
    try:
        return InvoiceModel.from_domain(await repository.create(payload.to_domain()))
    except PersistenceError as exc:
        raise _storage_error("creating invoice", exc) from exc


@router.patch("/{invoice_id}/status", response_model=InvoiceModel, status_code=status.HTTP_200_OK)
async def update_invoice_status(
    invoice_id: str,
    payload: InvoiceStatusUpdate,
    repository: InvoiceRepository = Depends(get_invoice_repository),
) -> InvoiceModel:
    try:
        invoice = await repository.update_status(invoice_id, payload.status)
    except PersistenceError as exc:
        raise _storage_error("updating invoice", exc) from exc
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Invoice {invoice_id} not found")
    return InvoiceModel.from_domain(invoice)
