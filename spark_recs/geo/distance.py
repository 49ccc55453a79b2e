from __future__ import annotations

from typing import Sequence

import numpy as np

from ..recommendations.models import GeoCoordinate

EARTH_RADIUS_KM = 6371.0


def _haversine(lat1, lng1, lat2, lng2):
    lat1, lng1, lat2, lng2 = map(np.radians, (lat1, lng1, lat2, lng2))
    h = (
        np.sin((lat2 - lat1) / 2.0) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lng2 - lng1) / 2.0) ** 2
    )
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = np.clip(h, 0.0, 1.0)
    return 2.0 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(h))


def distance_km(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle distance in kilometres on a spherical Earth."""
    if a.lat == b.lat and a.lng == b.lng:
        return 0.0
    return float(_haversine(a.lat, a.lng, b.lat, b.lng))


def distances_km(
    origin: GeoCoordinate,
    lats: Sequence[float | None],
    lngs: Sequence[float | None],
) -> np.ndarray:
    """Distances from *origin* to each (lat, lng) pair; NaN where either is missing."""
    lat_arr = np.array([np.nan if v is None else v for v in lats], dtype=float)
    lng_arr = np.array([np.nan if v is None else v for v in lngs], dtype=float)
    if lat_arr.size == 0:
        return lat_arr
    return _haversine(origin.lat, origin.lng, lat_arr, lng_arr)
