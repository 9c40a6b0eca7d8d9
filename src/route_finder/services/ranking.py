"""Proximity ranking of catalog points around an origin."""

from __future__ import annotations

import heapq
import logging
from typing import Callable, Sequence

from ..errors import InvalidArgument
from ..models.domain import Origin, Point, RankedPoint
from .geospatial import haversine_m, validate_coordinates

logger = logging.getLogger(__name__)

DistanceFn = Callable[[float, float, float, float], float]


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be an integer, got {limit!r}.")
    if limit <= 0:
        raise InvalidArgument(f"limit must be greater than zero, got {limit}.")
    return limit


def find_nearest(
    origin: Origin,
    catalog: Sequence[Point],
    limit: int,
    *,
    distance: DistanceFn = haversine_m,
) -> list[RankedPoint]:
    """Return the ``limit`` catalog points closest to ``origin``, nearest first.

    Ties keep catalog order, so the output is deterministic for a given
    catalog sequence. An empty catalog yields an empty list.
    """
    _validate_limit(limit)
    origin_lat, origin_lon = validate_coordinates(origin.latitude, origin.longitude, "origin")
    for point in catalog:
        validate_coordinates(point.latitude, point.longitude, f"point {point.id!r}")

    if not catalog:
        return []

    scored = (
        (distance(origin_lat, origin_lon, point.latitude, point.longitude), index, point)
        for index, point in enumerate(catalog)
    )
    if limit >= len(catalog):
        nearest = sorted(scored, key=lambda item: (item[0], item[1]))
    else:
        nearest = heapq.nsmallest(limit, scored, key=lambda item: (item[0], item[1]))

    logger.debug("Ranked %d catalog points, returning %d", len(catalog), len(nearest))
    return [RankedPoint(point=point, distance_m=dist) for dist, _, point in nearest]
