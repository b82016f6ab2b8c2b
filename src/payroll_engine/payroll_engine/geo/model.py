from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not (-90.0 <= self.latitude <= 90.0):
            raise ValidationError(f"latitude out of range: {self.latitude}", field="latitude")
        if not (-180.0 <= self.longitude <= 180.0):
            raise ValidationError(f"longitude out of range: {self.longitude}", field="longitude")

    @classmethod
    def of(cls, latitude: Optional[float], longitude: Optional[float]) -> Optional["Coordinate"]:
        """Build a coordinate, or None when either component is missing."""
        if latitude is None or longitude is None:
            return None
        return cls(float(latitude), float(longitude))


@dataclass(frozen=True)
class StoreLocation:
    """Read model: where a store is and how far from it a check-in is accepted."""

    store_id: int
    coordinate: Optional[Coordinate]
    radius_meters: int

    def __post_init__(self):
        if self.radius_meters is None or self.radius_meters <= 0:
            raise ValidationError("radius must be positive", field="radius_meters")

    @property
    def has_location(self) -> bool:
        return self.coordinate is not None
