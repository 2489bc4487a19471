import asyncio

import httpx
import pytest

from quote_engine.config import settings
from quote_engine.models.domain import Coordinate
from quote_engine.services.distance.resolver import DistanceResolver
from quote_engine.services.distance.routing_client import DistanceMatrixClient
from quote_engine.services.distance.static_table import KNOWN_DISTANCES_KM, lookup_known_distance
from quote_engine.services.distance.strategies import (
    DistanceStrategy,
    GeocodeDistanceStrategy,
    RoutingDistanceStrategy,
    StaticTableStrategy,
    StrategySkipped,
)
from quote_engine.services.geospatial import estimate_road_distance_km, haversine_km

ORIGIN = Coordinate(latitude=45.6426, longitude=-73.6274)


class DummyGeocoder:
    def __init__(self, result: Coordinate | None) -> None:
        self.result = result
        self.calls: list[str] = []

    async def geocode(self, address: str) -> Coordinate | None:
        self.calls.append(address)
        return self.result


class FixedStrategy(DistanceStrategy):
    def __init__(self, name: str, value: float | None = None, error: Exception | None = None, delay: float = 0.0) -> None:
        self.name = name
        self.value = value
        self.error = error
        self.delay = delay
        self.calls = 0

    async def estimate(self, address: str) -> float:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


def test_haversine_known_distance() -> None:
    # Montréal to Québec City is roughly 233 km as the crow flies
    distance = haversine_km(45.5017, -73.5673, 46.8139, -71.2080)
    assert 230 < distance < 236
    assert haversine_km(45.5, -73.5, 45.5, -73.5) == 0.0


def test_unconfigured_routing_falls_through_to_geocode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "routing_api_key", None)
    destination = Coordinate(latitude=45.5017, longitude=-73.5673)
    geocoder = DummyGeocoder(destination)
    resolver = DistanceResolver(
        strategies=[
            RoutingDistanceStrategy(ORIGIN),
            GeocodeDistanceStrategy(ORIGIN, geocoder=geocoder, road_factor=1.2),
            StaticTableStrategy(),
        ]
    )

    estimate = asyncio.run(resolver.resolve("1000 Rue Sherbrooke O, Montréal"))

    assert estimate.source == "geocode"
    assert estimate.distance_km == estimate_road_distance_km(ORIGIN, destination, 1.2)
    assert geocoder.calls == ["1000 Rue Sherbrooke O, Montréal"]


def test_unknown_address_uses_default_distance() -> None:
    resolver = DistanceResolver(
        strategies=[
            FixedStrategy("routing", error=StrategySkipped("not configured")),
            GeocodeDistanceStrategy(ORIGIN, geocoder=DummyGeocoder(None)),
            StaticTableStrategy(default_km=45.0),
        ]
    )

    estimate = asyncio.run(resolver.resolve("123 Nowhere Road"))

    assert estimate.distance_km == 45.0
    assert estimate.source == "static"


def test_first_successful_tier_wins() -> None:
    routing = FixedStrategy("routing", value=12.34)
    geocode = FixedStrategy("geocode", value=99.0)
    resolver = DistanceResolver(strategies=[routing, geocode])

    estimate = asyncio.run(resolver.resolve("Laval"))

    assert estimate.distance_km == 12.34
    assert estimate.source == "routing"
    assert geocode.calls == 0


def test_tier_errors_and_timeouts_are_skipped() -> None:
    resolver = DistanceResolver(
        strategies=[
            FixedStrategy("routing", value=1.0, delay=1.0),
            FixedStrategy("geocode", error=httpx.ConnectError("unreachable")),
            StaticTableStrategy(),
        ],
        timeouts={"routing": 0.01},
    )

    estimate = asyncio.run(resolver.resolve("Terrebonne"))

    assert estimate.distance_km == 23.8
    assert estimate.source == "static"


def test_negative_distance_is_rejected() -> None:
    resolver = DistanceResolver(strategies=[FixedStrategy("routing", value=-5.0)], fallback_km=45.0)

    estimate = asyncio.run(resolver.resolve("Brossard"))

    assert estimate.distance_km == 45.0


def test_empty_address_resolves_to_zero() -> None:
    routing = FixedStrategy("routing", value=10.0)
    resolver = DistanceResolver(strategies=[routing])

    assert asyncio.run(resolver.resolve_distance_km("   ")) == 0.0
    assert asyncio.run(resolver.resolve("")).source == "empty"
    assert routing.calls == 0


def test_static_table_matches_in_declared_order() -> None:
    assert lookup_known_distance("94 Rue Paré, Granby, QC") == 96.2
    assert lookup_known_distance("12 boul. Saint-Martin, LAVAL") == 16.8
    # "montréal" is declared before "montréal-nord"
    assert lookup_known_distance("5000 Boul. Henri-Bourassa, Montréal-Nord") == 18.5
    assert lookup_known_distance("Somewhere in Ontario") is None
    assert KNOWN_DISTANCES_KM[0] == ("granby", 96.2)


def test_malformed_routing_payload_falls_through_to_static_table() -> None:
    client = DistanceMatrixClient(
        api_key="k",
        base_url="https://routing.test/json",
        max_retries=0,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=["unexpected"])),
    )
    resolver = DistanceResolver(
        strategies=[RoutingDistanceStrategy(ORIGIN, client=client), StaticTableStrategy(default_km=45.0)],
    )

    estimate = asyncio.run(resolver.resolve("123 Nowhere Road"))

    assert estimate.distance_km == 45.0
    assert estimate.source == "static"


def test_unexpected_tier_error_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    resolver = DistanceResolver(
        strategies=[FixedStrategy("routing", error=AttributeError("'list' object has no attribute 'get'")), FixedStrategy("geocode", value=31.2)],
    )

    estimate = asyncio.run(resolver.resolve("Mascouche"))

    assert estimate.distance_km == 31.2
    assert estimate.source == "geocode"
    assert "Unexpected error in distance tier 'routing'" in caplog.text
