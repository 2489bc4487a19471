"""Distance resolution across routing, geocoding and static-table tiers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .strategies import (
    DistanceStrategy,
    GeocodeDistanceStrategy,
    RoutingDistanceStrategy,
    StaticTableStrategy,
    StrategySkipped,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DistanceEstimate:
    distance_km: float
    source: str


def service_origin() -> Coordinate:
    return Coordinate(latitude=settings.origin_latitude, longitude=settings.origin_longitude)


def build_default_strategies(origin: Coordinate | None = None) -> list[DistanceStrategy]:
    origin = origin or service_origin()
    return [
        RoutingDistanceStrategy(origin),
        GeocodeDistanceStrategy(origin),
        StaticTableStrategy(),
    ]


class DistanceResolver:
    """Walk the strategies in order and return the first concrete distance.

    ``resolve`` never raises: every tier failure is logged and skipped, and
    the last tier (static table) always answers. Each tier is bounded by its
    own timeout.
    """

    def __init__(
        self,
        strategies: Sequence[DistanceStrategy] | None = None,
        timeouts: dict[str, float] | None = None,
        fallback_km: float | None = None,
    ) -> None:
        self.strategies = list(strategies) if strategies is not None else build_default_strategies()
        self.timeouts = {
            "routing": settings.routing_timeout_seconds,
            "geocode": settings.geocoder_timeout_seconds,
        }
        if timeouts:
            self.timeouts.update(timeouts)
        self.fallback_km = fallback_km if fallback_km is not None else settings.default_distance_km

    async def _attempt(self, strategy: DistanceStrategy, address: str) -> float | None:
        timeout = self.timeouts.get(strategy.name)
        try:
            distance_km = await asyncio.wait_for(strategy.estimate(address), timeout=timeout)
        except StrategySkipped as e:
            logger.info(f"Distance tier '{strategy.name}' skipped: {e}")
            return None
        except asyncio.TimeoutError:
            logger.warning(f"Distance tier '{strategy.name}' timed out after {timeout}s")
            return None
        except (httpx.HTTPError, ValueError, OSError) as e:
            logger.warning(f"Distance tier '{strategy.name}' failed: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error in distance tier '{strategy.name}', trying the next tier: {e}")
            return None

        if distance_km is None or distance_km < 0:
            logger.warning(f"Distance tier '{strategy.name}' returned an invalid distance: {distance_km!r}")
            return None
        return distance_km

    async def resolve(self, address: str) -> DistanceEstimate:
        if not address or not address.strip():
            return DistanceEstimate(distance_km=0.0, source="empty")

        for strategy in self.strategies:
            distance_km = await self._attempt(strategy, address)
            if distance_km is not None:
                logger.info(f"Distance for '{address}' resolved by '{strategy.name}': {distance_km:.2f} km")
                return DistanceEstimate(distance_km=distance_km, source=strategy.name)

        logger.warning(f"All distance tiers failed for '{address}', using {self.fallback_km} km")
        return DistanceEstimate(distance_km=self.fallback_km, source="static")

    async def resolve_distance_km(self, address: str) -> float:
        estimate = await self.resolve(address)
        return estimate.distance_km
