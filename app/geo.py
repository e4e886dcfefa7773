# app/geo.py
"""Great-circle distances and distance ranking of listings."""
from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt
from typing import Any, Iterable, List

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers between two points in decimal degrees.

    No range checking is done; callers validate coordinates first.
    """
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    # float overshoot near antipodes can push a outside [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class ScoredListing:
    listing: Any
    distance: float

    @property
    def display_distance(self) -> str:
        return f"{self.distance:.2f}"


def rank_by_distance(listings: Iterable[Any], latitude: float, longitude: float) -> List[ScoredListing]:
    """Attach the distance from (latitude, longitude) to each listing, nearest first.

    `sorted` is stable, so listings at equal distance keep their input order.
    """
    scored = [
        ScoredListing(item, distance_km(latitude, longitude, item.latitude, item.longitude))
        for item in listings
    ]
    return sorted(scored, key=lambda s: s.distance)
