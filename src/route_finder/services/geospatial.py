"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..errors import InvalidArgument

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push a just outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def duration_s(distance_m: float, average_speed_mps: float) -> float:
    """Estimate travel time for a distance at a constant average speed."""

    if not average_speed_mps > 0:
        raise InvalidArgument(f"Average speed must be positive, got {average_speed_mps!r}.")
    return distance_m / average_speed_mps


def validate_coordinates(latitude: float, longitude: float, label: str = "coordinate") -> tuple[float, float]:
    """Return the pair as floats or raise ``InvalidArgument`` when out of range."""

    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{label} has non-numeric coordinates ({latitude!r}, {longitude!r}).") from exc
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidArgument(f"{label} has non-finite coordinates ({lat}, {lon}).")
    if not -90.0 <= lat <= 90.0:
        raise InvalidArgument(f"{label} latitude {lat} is outside [-90, 90].")
    if not -180.0 <= lon <= 180.0:
        raise InvalidArgument(f"{label} longitude {lon} is outside [-180, 180].")
    return lat, lon
