"""Domain models for catalog addresses and request origins."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Point:
    """A geocoded catalog address. Free-text fields are opaque to the core."""

    id: str
    name: str
    latitude: float
    longitude: float
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = "USA"
    notes: Optional[str] = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class Origin:
    """Per-request starting position supplied by the caller."""

    latitude: float
    longitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RankedPoint:
    point: Point
    distance_m: float
