import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from quote_engine.models.domain import (
    CustomerInfo,
    SelectedService,
    ServiceCatalog,
    ServiceCatalogEntry,
)
from quote_engine.services.distance.resolver import DistanceEstimate
from quote_engine.services.latest import LatestWins
from quote_engine.services.pricing import PricingRates
from quote_engine.services.quotes.session import QuoteSession
from quote_engine.services.scheduling.slots import SlotAvailabilityEngine

NOW = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)
RATES = PricingRates(rate_per_km=0.61, travel_cost_cap=55.0, tax_rate=0.14975)


class DelayedResolver:
    """Resolves addresses after a per-address delay."""

    def __init__(self, distances: dict[str, float], delays: dict[str, float]) -> None:
        self.distances = distances
        self.delays = delays
        self.calls: list[str] = []

    async def resolve(self, address: str) -> DistanceEstimate:
        self.calls.append(address)
        await asyncio.sleep(self.delays.get(address, 0.0))
        return DistanceEstimate(distance_km=self.distances[address], source="routing")


class DummyCalendar:
    async def list_busy_starts(self, day: date) -> list[datetime]:
        return []

    async def create_appointment(self, appointment) -> dict:
        return {}


def _session(resolver, debounce: float = 0.0) -> QuoteSession:
    engine = SlotAvailabilityEngine(
        calendar=DummyCalendar(),
        lead_time=timedelta(hours=72),
        business_hours=(8, 18),
        business_days=(0, 1, 2, 3, 4, 5, 6),
        timezone="UTC",
        clock=lambda: NOW,
    )
    catalog = ServiceCatalog([ServiceCatalogEntry(service_id="S1", name="Oil change", base_price=100.0)])
    return QuoteSession(catalog, resolver=resolver, slot_engine=engine, rates=RATES, debounce=debounce)


def test_stale_result_is_discarded_even_when_it_finishes_last() -> None:
    applied: list[str] = []

    async def scenario() -> None:
        gate: LatestWins[str] = LatestWins(applied.append)
        release = asyncio.Event()

        async def slow() -> str:
            try:
                await release.wait()
            except asyncio.CancelledError:
                # A computation that ignores cancellation still must not win
                await release.wait()
            return "old"

        async def fast() -> str:
            return "new"

        first = gate.submit(slow)
        await asyncio.sleep(0)
        gate.submit(fast)
        await gate.wait()
        release.set()
        await asyncio.wait([first])

    asyncio.run(scenario())

    assert applied == ["new"]


def test_debounce_runs_only_the_last_call() -> None:
    calls: list[int] = []
    applied: list[int] = []

    async def scenario() -> None:
        gate: LatestWins[int] = LatestWins(applied.append, debounce=0.05)

        def factory(value: int):
            async def run() -> int:
                calls.append(value)
                return value

            return run

        for value in (1, 2, 3):
            gate.submit(factory(value))
            await asyncio.sleep(0.01)
        await gate.wait()

    asyncio.run(scenario())

    assert calls == [3]
    assert applied == [3]


def test_session_keeps_distance_of_latest_address() -> None:
    resolver = DelayedResolver(
        distances={"Laval": 16.8, "Granby": 96.2},
        delays={"Laval": 0.05, "Granby": 0.0},
    )
    session = _session(resolver)

    async def scenario() -> None:
        session.change_address("Laval")
        await asyncio.sleep(0.01)
        session.change_address("Granby")
        await session.settle()

    asyncio.run(scenario())

    assert session.state.address == "Granby"
    assert session.distance_km == 96.2


def test_session_recomputes_slots_for_latest_date() -> None:
    session = _session(DelayedResolver({}, {}))

    async def scenario() -> None:
        session.change_date(date(2026, 1, 6))
        session.change_date(date(2026, 1, 10))
        await session.settle()

    asyncio.run(scenario())

    assert session.state.availability.day == date(2026, 1, 10)
    assert session.state.availability.any_available


def test_session_prices_current_selection() -> None:
    session = _session(DelayedResolver({"Terrebonne": 23.8}, {}))
    session.set_selections([SelectedService("S1")])

    async def scenario() -> None:
        session.change_address("Terrebonne")
        await session.settle()

    asyncio.run(scenario())

    breakdown = session.price()
    assert breakdown.subtotal == pytest.approx(100.0)
    assert breakdown.travel_cost == pytest.approx(23.8 * 0.61)


def test_session_submission_uses_resolved_distance() -> None:
    session = _session(DelayedResolver({"Laval": 16.8}, {}))
    session.set_selections([SelectedService("S1")])
    customer = CustomerInfo(
        name="Jane Doe",
        email="jane@example.com",
        phone="514-555-0100",
        address="Laval",
        vehicle_info="2019 Honda Civic",
    )

    assert session.submission(customer, "8h00 - 11h00", True).distance_km is None

    async def scenario() -> None:
        session.change_address("Laval")
        session.change_date(date(2026, 1, 10))
        await session.settle()

    asyncio.run(scenario())

    submission = session.submission(customer, "8h00 - 11h00", True)
    assert submission.distance_km == 16.8
    assert session.can_submit(submission)


def test_submission_for_another_address_leaves_distance_unresolved() -> None:
    session = _session(DelayedResolver({"Laval": 16.8}, {}))
    session.set_selections([SelectedService("S1")])
    customer = CustomerInfo(
        name="Jane Doe",
        email="jane@example.com",
        phone="514-555-0100",
        address="Granby",
        vehicle_info="2019 Honda Civic",
    )

    async def scenario() -> None:
        session.change_address("Laval")
        await session.settle()

    asyncio.run(scenario())

    assert session.state.distance.distance_km == 16.8
    assert session.submission(customer, "8h00 - 11h00", True).distance_km is None
