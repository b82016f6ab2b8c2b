"""Geofencing: Haversine distance and radius membership.

Verification fails closed: a missing coordinate never proves presence, so the
checks below answer ``False`` instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..core.constants import EARTH_RADIUS_KM
from ..core.exceptions import ValidationError
from ..stores.repository import StoreLocationLookup
from .model import Coordinate

logger = logging.getLogger(__name__)


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters on a sphere of radius 6371 km."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Clamp against rounding drift just above 1.0 for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * 1000.0 * math.asin(math.sqrt(h))


def is_within_radius(center: Optional[Coordinate], point: Optional[Coordinate], radius_meters: float) -> bool:
    if center is None or point is None or radius_meters is None:
        return False
    return distance_meters(center, point) <= radius_meters


def _coerce_point(latitude: Optional[float], longitude: Optional[float]) -> Optional[Coordinate]:
    try:
        return Coordinate.of(latitude, longitude)
    except (TypeError, ValueError, ValidationError):
        return None


class LocationVerificationService:
    """Checks whether a user stands inside a store's allowed radius."""

    def __init__(self, stores: StoreLocationLookup):
        self._stores = stores

    def verify_user_in_store(self, store_id: int, latitude: Optional[float], longitude: Optional[float]) -> bool:
        point = _coerce_point(latitude, longitude)
        if point is None:
            return False

        store = self._stores.get(store_id)
        if not store.has_location:
            logger.warning("store %s has no location set; geofence check denied", store_id)
            return False

        return is_within_radius(store.coordinate, point, store.radius_meters)
