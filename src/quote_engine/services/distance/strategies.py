"""Distance estimation strategies, from most to least precise."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...config import settings
from ...models.domain import Coordinate
from ..geospatial import estimate_road_distance_km
from .geocoder import NominatimGeocoder
from .routing_client import DistanceMatrixClient, RoutingNotConfiguredError
from .static_table import KNOWN_DISTANCES_KM, lookup_known_distance


class StrategySkipped(Exception):
    """Raised by a strategy that cannot produce an estimate for an address."""


class DistanceStrategy(ABC):
    """Contract for a single distance-resolution tier."""

    name: str = "strategy"

    @abstractmethod
    async def estimate(self, address: str) -> float:
        """Return a distance in km, or raise ``StrategySkipped``."""
        raise NotImplementedError


class RoutingDistanceStrategy(DistanceStrategy):
    name = "routing"

    def __init__(self, origin: Coordinate, client: DistanceMatrixClient | None = None) -> None:
        self.origin = origin
        self._client = client

    def _get_client(self) -> DistanceMatrixClient:
        if self._client is None:
            try:
                self._client = DistanceMatrixClient()
            except RoutingNotConfiguredError as e:
                raise StrategySkipped(str(e)) from e
        return self._client

    async def estimate(self, address: str) -> float:
        distance_km = await self._get_client().driving_distance_km(self.origin, address)
        if distance_km is None:
            raise StrategySkipped("routing API returned no distance")
        return distance_km


class GeocodeDistanceStrategy(DistanceStrategy):
    name = "geocode"

    def __init__(
        self,
        origin: Coordinate,
        geocoder: NominatimGeocoder | None = None,
        road_factor: float | None = None,
    ) -> None:
        self.origin = origin
        self.geocoder = geocoder or NominatimGeocoder()
        self.road_factor = road_factor if road_factor is not None else settings.road_distortion_factor

    async def estimate(self, address: str) -> float:
        coordinate = await self.geocoder.geocode(address)
        if coordinate is None:
            raise StrategySkipped("address could not be geocoded")
        return estimate_road_distance_km(self.origin, coordinate, self.road_factor)


class StaticTableStrategy(DistanceStrategy):
    """Last resort: known-locality table, then a fixed default. Never skips."""

    name = "static"

    def __init__(
        self,
        table: tuple[tuple[str, float], ...] = KNOWN_DISTANCES_KM,
        default_km: float | None = None,
    ) -> None:
        self.table = table
        self.default_km = default_km if default_km is not None else settings.default_distance_km

    async def estimate(self, address: str) -> float:
        distance_km = lookup_known_distance(address, self.table)
        if distance_km is None:
            return self.default_km
        return distance_km

