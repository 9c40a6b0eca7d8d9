"""Travel cost models turning coordinates into distance and duration matrices.

The sequencer only talks to :class:`CostModel`, so a road-network source can
replace the great-circle estimate without touching ranking or sequencing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

import httpx

from ...config import Settings, settings
from ...errors import InvalidArgument
from ..geospatial import duration_s, haversine_m
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)

Coordinate = tuple[float, float]


@dataclass(slots=True)
class CostMatrix:
    """Square matrices in meters and seconds, indexed like the input coordinates."""

    distances: List[List[float]]
    durations: List[List[float]]


class CostModel(Protocol):
    def matrix(self, coordinates: Sequence[Coordinate]) -> CostMatrix:
        ...


class HaversineCostModel:
    """Great-circle distance with a constant average speed."""

    def __init__(self, average_speed_kmh: float | None = None) -> None:
        speed_kmh = average_speed_kmh if average_speed_kmh is not None else settings.average_speed_kmh
        if not speed_kmh > 0:
            raise InvalidArgument(f"Average speed must be positive, got {speed_kmh!r} km/h.")
        self.average_speed_mps = speed_kmh * 1000.0 / 3600.0

    def distance(self, a: Coordinate, b: Coordinate) -> float:
        return haversine_m(a[0], a[1], b[0], b[1])

    def duration(self, distance_m: float) -> float:
        return duration_s(distance_m, self.average_speed_mps)

    def matrix(self, coordinates: Sequence[Coordinate]) -> CostMatrix:
        n = len(coordinates)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                dist = self.distance(coordinates[i], coordinates[j])
                distances[i][j] = distances[j][i] = dist
                durations[i][j] = durations[j][i] = self.duration(dist)
        return CostMatrix(distances=distances, durations=durations)


class OSRMCostModel:
    """Road-network costs from an OSRM table, degrading to haversine estimates."""

    def __init__(self, client: OSRMClient | None = None, fallback: HaversineCostModel | None = None) -> None:
        self.client = client or OSRMClient()
        self.fallback = fallback or HaversineCostModel()

    def matrix(self, coordinates: Sequence[Coordinate]) -> CostMatrix:
        estimate = self.fallback.matrix(coordinates)
        if len(coordinates) < 2:
            return estimate

        try:
            table = self.client.table(coordinates)
        except (ConnectionError, ValueError, httpx.HTTPError) as e:
            logger.warning("OSRM table request failed: %s. Using haversine fallback.", e)
            return estimate

        n = len(coordinates)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0.0] * n for _ in range(n)]
        unreachable = 0
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                dist = table["distances"][i][j]
                dur = table["durations"][i][j]
                if dist is None or dur is None:
                    unreachable += 1
                    dist, dur = estimate.distances[i][j], estimate.durations[i][j]
                distances[i][j] = float(dist)
                durations[i][j] = float(dur)

        if unreachable:
            logger.warning(
                "%d of %d OSRM matrix cells were unreachable; filled with haversine estimates.",
                unreachable, n * (n - 1),
            )
        return CostMatrix(distances=distances, durations=durations)


def build_cost_model(config: Settings | None = None) -> CostModel:
    config = config or settings
    haversine = HaversineCostModel(config.average_speed_kmh)
    if config.cost_model == "osrm":
        if not config.osrm_base_url:
            logger.warning("cost_model is 'osrm' but no OSRM base URL is configured; using haversine.")
            return haversine
        return OSRMCostModel(
            client=OSRMClient(
                base_url=config.osrm_base_url,
                profile=config.osrm_profile,
                timeout=config.osrm_timeout_seconds,
                max_retries=config.osrm_max_retries,
                backoff_seconds=config.osrm_backoff_seconds,
            ),
            fallback=haversine,
        )
    return haversine
