"""Interactive quoting state for one customer session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ...config import settings
from ...models.domain import CustomerInfo, PriceBreakdown, SelectedService, ServiceCatalog
from ..distance.resolver import DistanceEstimate, DistanceResolver
from ..latest import LatestWins
from ..pricing import PricingRates, price_quote
from ..scheduling.slots import SlotAvailability, SlotAvailabilityEngine
from .orchestrator import QuoteSubmissionService, SubmissionResult
from .validation import QuoteSubmission, is_submission_valid


@dataclass(slots=True)
class SessionState:
    address: str = ""
    distance: Optional[DistanceEstimate] = None
    preferred_date: Optional[date] = None
    availability: Optional[SlotAvailability] = None
    selections: list[SelectedService] = field(default_factory=list)


class QuoteSession:
    """Holds one customer's form state.

    Address changes trigger a debounced distance resolution and date changes
    trigger a slot recomputation; in both cases only the most recently issued
    computation may update the state. The catalog snapshot is fixed for the
    session and replaced only through ``reload_catalog``.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        resolver: DistanceResolver | None = None,
        slot_engine: SlotAvailabilityEngine | None = None,
        rates: PricingRates | None = None,
        debounce: float | None = None,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver or DistanceResolver()
        self.slot_engine = slot_engine or SlotAvailabilityEngine()
        self.rates = rates or PricingRates.from_settings()
        self.state = SessionState()
        delay = settings.distance_debounce_seconds if debounce is None else debounce
        self._distance_gate: LatestWins[DistanceEstimate] = LatestWins(self._apply_distance, debounce=delay, name="distance")
        self._slots_gate: LatestWins[SlotAvailability] = LatestWins(self._apply_slots, name="slots")

    def _apply_distance(self, estimate: DistanceEstimate) -> None:
        self.state.distance = estimate

    def _apply_slots(self, availability: SlotAvailability) -> None:
        self.state.availability = availability

    @property
    def distance_km(self) -> float:
        return self.state.distance.distance_km if self.state.distance else 0.0

    def reload_catalog(self, catalog: ServiceCatalog) -> None:
        self.catalog = catalog

    def set_selections(self, selections: list[SelectedService]) -> None:
        self.state.selections = list(selections)

    def change_address(self, address: str):
        self.state.address = address
        return self._distance_gate.submit(lambda: self.resolver.resolve(address))

    def change_date(self, day: date):
        self.state.preferred_date = day
        self.state.availability = None
        return self._slots_gate.submit(lambda: self.slot_engine.availability(day))

    async def settle(self) -> None:
        """Wait for the latest distance and slot computations."""
        await self._distance_gate.wait()
        await self._slots_gate.wait()

    def price(self) -> PriceBreakdown:
        return price_quote(self.state.selections, self.catalog, self.distance_km, self.rates)

    def submission(self, customer: CustomerInfo, time_slot: str, accepted_terms: bool) -> QuoteSubmission:
        distance_km = None
        # A distance resolved for another address is left for the orchestrator to re-resolve
        if self.state.distance is not None and customer.address == self.state.address:
            distance_km = self.state.distance.distance_km
        return QuoteSubmission(
            customer=customer,
            services=tuple(self.state.selections),
            preferred_date=self.state.preferred_date,
            time_slot=time_slot,
            accepted_terms=accepted_terms,
            distance_km=distance_km,
        )

    def can_submit(self, submission: QuoteSubmission, now: datetime | None = None) -> bool:
        return is_submission_valid(submission, self.distance_km, self.slot_engine, now)

    async def submit(
        self,
        service: QuoteSubmissionService,
        customer: CustomerInfo,
        time_slot: str,
        accepted_terms: bool,
    ) -> SubmissionResult:
        await self.settle()
        return await service.submit(self.submission(customer, time_slot, accepted_terms))
