"""Quote and invoice repositories: Supabase when configured, local JSON records otherwise."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from ..db.supabase import get_supabase_client
from ..models.domain import Invoice, InvoiceStatus, Quote, QuoteStatus
from .filesystem import FileStorage
from .records import invoice_from_record, invoice_to_record, quote_from_record, quote_to_record

logger = logging.getLogger(__name__)

QUOTES_TABLE = "quotes"
INVOICES_TABLE = "invoices"


class PersistenceError(RuntimeError):
    """Raised when a record cannot be stored or read."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _RecordStore:
    """Create/list/update over a Supabase table, or JSON files when Supabase is absent."""

    def __init__(self, table: str, key: str, storage: FileStorage | None = None, client: Any = None) -> None:
        self.table = table
        self.key = key
        self._storage = storage
        self._client = client

    def _supabase(self):
        if self._client is not None:
            return self._client
        if self._storage is not None:
            return None
        return get_supabase_client()

    def _files(self) -> FileStorage:
        if self._storage is None:
            self._storage = FileStorage()
        return self._storage

    def insert(self, record: dict) -> dict:
        supabase = self._supabase()
        try:
            if supabase:
                response = supabase.table(self.table).insert(record).execute()
                return (response.data or [record])[0]
            self._files().write_record(self.table, record[self.key], record)
            return record
        except Exception as e:
            raise PersistenceError(f"Failed to store {self.table} record {record.get(self.key)}: {e}") from e

    def select_all(self) -> list[dict]:
        supabase = self._supabase()
        try:
            if supabase:
                response = supabase.table(self.table).select("*").execute()
                return list(response.data or [])
            return self._files().list_records(self.table)
        except Exception as e:
            raise PersistenceError(f"Failed to list {self.table} records: {e}") from e

    def update(self, record_id: str, changes: dict) -> dict | None:
        supabase = self._supabase()
        try:
            if supabase:
                response = supabase.table(self.table).update(changes).eq(self.key, record_id).execute()
                return response.data[0] if response.data else None
            record = self._files().read_record(self.table, record_id)
            if record is None:
                return None
            record.update(changes)
            self._files().write_record(self.table, record_id, record)
            return record
        except Exception as e:
            raise PersistenceError(f"Failed to update {self.table} record {record_id}: {e}") from e


class QuoteRepository:
    def __init__(self, storage: FileStorage | None = None, client: Any = None) -> None:
        self._store = _RecordStore(QUOTES_TABLE, "quote_id", storage=storage, client=client)

    async def create(self, quote: Quote) -> dict:
        record = quote_to_record(quote)
        stored = await asyncio.to_thread(self._store.insert, record)
        logger.info(f"Stored quote {quote.quote_id}")
        return stored

    async def list(self) -> list[Quote]:
        records = await asyncio.to_thread(self._store.select_all)
        quotes = []
        for record in records:
            try:
                quotes.append(quote_from_record(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid quote record: {e}")
        return sorted(quotes, key=lambda quote: quote.created_at, reverse=True)

    async def update_status(self, quote_id: str, status: QuoteStatus) -> Quote | None:
        record = await asyncio.to_thread(
            self._store.update, quote_id, {"status": status.value, "updated_at": _now_iso()}
        )
        return quote_from_record(record) if record else None


def matches_invoice_query(invoice: Invoice, query: str) -> bool:
    """Case-insensitive substring match on email, number and id; plain substring on phone."""
    needle = query.strip().lower()
    if not needle:
        return False
    return (
        needle in (invoice.customer_email or "").lower()
        or query.strip() in (invoice.customer_phone or "")
        or needle in (invoice.invoice_number or "").lower()
        or needle in (invoice.invoice_id or "").lower()
    )


class InvoiceRepository:
    def __init__(self, storage: FileStorage | None = None, client: Any = None) -> None:
        self._store = _RecordStore(INVOICES_TABLE, "invoice_id", storage=storage, client=client)

    async def create(self, invoice: Invoice) -> Invoice:
        now = _now_iso()
        invoice.created_at = invoice.created_at or now
        invoice.updated_at = now
        stored = await asyncio.to_thread(self._store.insert, invoice_to_record(invoice))
        return invoice_from_record(stored)

    async def list(self) -> list[Invoice]:
        records = await asyncio.to_thread(self._store.select_all)
        invoices = []
        for record in records:
            try:
                invoices.append(invoice_from_record(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid invoice record: {e}")
        return invoices

    async def search(self, query: str) -> list[Invoice]:
        # The backing stores offer no text search; filter the full list client-side.
        return [invoice for invoice in await self.list() if matches_invoice_query(invoice, query)]

    async def by_email(self, email: str) -> list[Invoice]:
        target = email.strip().lower()
        return [invoice for invoice in await self.list() if (invoice.customer_email or "").lower() == target]

    async def update_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice | None:
        record = await asyncio.to_thread(
            self._store.update, invoice_id, {"status": status.value, "updated_at": _now_iso()}
        )
        return invoice_from_record(record) if record else None
