"""Domain models for catalog, selections, slots, quotes and invoices."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Iterable, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS-84 point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ServiceOption:
    name: str
    price: float


@dataclass(frozen=True, slots=True)
class ServiceCatalogEntry:
    """A service offering with its base price and ordered options."""

    service_id: str
    name: str
    base_price: float
    options: tuple[ServiceOption, ...] = ()
    category: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    is_active: bool = True


class ServiceCatalog:
    """Read-only snapshot of the service catalog keyed by service id.

    Option indexes are positions within ``ServiceCatalogEntry.options`` and are
    only stable for the lifetime of a snapshot.
    """

    __slots__ = ("_entries", "_by_id")

    def __init__(self, entries: Iterable[ServiceCatalogEntry] = ()) -> None:
        self._entries = tuple(entries)
        self._by_id = {entry.service_id: entry for entry in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._by_id

    @property
    def entries(self) -> tuple[ServiceCatalogEntry, ...]:
        return self._entries

    def get(self, service_id: str) -> Optional[ServiceCatalogEntry]:
        return self._by_id.get(service_id)

    def option(self, service_id: str, option_index: int) -> Optional[ServiceOption]:
        """Return the option at ``option_index`` or None for a stale reference."""
        entry = self._by_id.get(service_id)
        if entry is None or option_index < 0 or option_index >= len(entry.options):
            return None
        return entry.options[option_index]

    def active(self) -> "ServiceCatalog":
        return ServiceCatalog(entry for entry in self._entries if entry.is_active)


@dataclass(frozen=True, slots=True)
class SelectedOption:
    option_index: int
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("Option quantity must be at least 1.")


@dataclass(frozen=True, slots=True)
class SelectedService:
    """A customer's selection for one service.

    The base price is included only when ``base_selected`` is true; options
    always contribute.
    """

    service_id: str
    base_selected: bool = True
    options: tuple[SelectedOption, ...] = ()


@dataclass(frozen=True, slots=True)
class SlotWindow:
    """One of the fixed daily appointment windows."""

    start: time
    end: time
    label: str


@dataclass(frozen=True, slots=True)
class TimeSlot:
    start: datetime
    end: datetime
    label: str
    available: bool


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    """Full-precision pricing figures. Round with ``rounded()`` at the display/persist boundary."""

    subtotal: float
    travel_cost: float
    taxes: float
    total: float

    def rounded(self, digits: int = 2) -> "PriceBreakdown":
        return PriceBreakdown(
            subtotal=round(self.subtotal, digits),
            travel_cost=round(self.travel_cost, digits),
            taxes=round(self.taxes, digits),
            total=round(self.total, digits),
        )


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    name: str
    email: str
    phone: str
    address: str
    vehicle_info: str
    vehicle_vin: Optional[str] = None


class QuoteStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class QuoteOptionLine:
    name: str
    price: float
    quantity: int
    total: float


@dataclass(frozen=True, slots=True)
class QuoteServiceLine:
    service_id: str
    service_name: str
    base_price: float
    base_selected: bool
    options: tuple[QuoteOptionLine, ...]
    total_price: float


@dataclass(frozen=True, slots=True)
class Quote:
    """Persisted record of a quote submission."""

    quote_id: str
    customer: CustomerInfo
    services: tuple[QuoteServiceLine, ...]
    distance_km: float
    subtotal: float
    travel_cost: float
    taxes: float
    total: float
    preferred_date: date
    time_slot: str
    appointment_start: datetime
    notes: Optional[str] = None
    status: QuoteStatus = QuoteStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


class InvoiceStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


@dataclass(slots=True)
class Invoice:
    invoice_id: str
    invoice_number: str
    customer_email: str
    customer_name: str
    customer_phone: str
    service_address: str
    service_name: str
    services: list[dict]
    distance: float
    subtotal: float
    taxes: float
    total_amount: float
    status: InvoiceStatus = InvoiceStatus.PENDING
    payment_method: Optional[str] = None
    service_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
