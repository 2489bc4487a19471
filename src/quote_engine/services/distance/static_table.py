"""Precomputed road distances from the workshop to known localities."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Matched in this order; the first key contained in the lower-cased address wins.
# Values are driving distances in km from the workshop (Montréal-Nord).
KNOWN_DISTANCES_KM: tuple[tuple[str, float], ...] = (
    # Granby
    ("granby", 96.2),
    ("94 rue paré", 96.2),
    ("rue paré granby", 96.2),
    # Montréal and boroughs
    ("montréal", 18.5),
    ("montreal", 18.5),
    ("ville-marie", 22.3),
    ("plateau", 20.1),
    ("rosemont", 8.2),
    ("verdun", 28.7),
    ("lachine", 32.4),
    ("lasalle", 35.8),
    ("ahuntsic", 4.2),
    ("villeray", 12.8),
    ("mercier", 14.6),
    ("anjou", 9.7),
    ("saint-léonard", 7.3),
    ("rivière-des-prairies", 12.4),
    ("montréal-nord", 0.5),
    # Laval
    ("laval", 16.8),
    ("chomedey", 19.2),
    ("sainte-rose", 24.7),
    ("vimont", 21.3),
    # South Shore
    ("longueuil", 32.6),
    ("brossard", 35.1),
    ("saint-lambert", 30.8),
    ("boucherville", 38.4),
    ("saint-bruno", 42.7),
    ("saint-hubert", 37.9),
    ("greenfield park", 33.2),
    # North Shore
    ("terrebonne", 23.8),
    ("mascouche", 28.4),
    ("repentigny", 19.6),
    ("charlemagne", 21.2),
    ("saint-eustache", 43.2),
    ("boisbriand", 38.7),
    ("sainte-thérèse", 40.9),
    # West Island
    ("dollard-des-ormeaux", 42.3),
    ("pointe-claire", 39.8),
    ("kirkland", 37.5),
    # Other regions
    ("sherbrooke", 178.5),
    ("trois-rivières", 168.2),
    ("quebec", 295.7),
)


def lookup_known_distance(
    address: str,
    table: tuple[tuple[str, float], ...] = KNOWN_DISTANCES_KM,
) -> float | None:
    """Return the distance of the first locality whose name appears in ``address``."""
    text = address.lower()
    for locality, distance_km in table:
        if locality in text:
            logger.info(f"Static distance table matched '{locality}': {distance_km} km")
            return distance_km
    return None
