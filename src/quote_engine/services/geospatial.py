"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Coordinate

# Mean Earth radius (IUGG).
EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def great_circle_km(origin: Coordinate, destination: Coordinate) -> float:
    return haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def estimate_road_distance_km(origin: Coordinate, destination: Coordinate, road_factor: float) -> float:
    """Approximate driving distance as great-circle distance scaled by ``road_factor``, to 2 decimals."""

    return round(great_circle_km(origin, destination) * road_factor, 2)
