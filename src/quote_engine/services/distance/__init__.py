"""Distance resolution services."""

from .resolver import DistanceEstimate, DistanceResolver, build_default_strategies, service_origin

__all__ = [
    "DistanceEstimate",
    "DistanceResolver",
    "build_default_strategies",
    "service_origin",
]
