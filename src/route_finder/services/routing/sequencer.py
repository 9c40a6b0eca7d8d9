"""Visit-order optimisation for a single open route starting at the origin.

The tour is built greedily (nearest neighbour) and then improved with 2-opt
segment reversals. Node 0 is always the origin and never moves; the path does
not return to it.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Sequence

from ...errors import InvalidArgument
from ...models.domain import Origin, Point
from ..geospatial import validate_coordinates
from .cost import CostModel, HaversineCostModel
from .models import Route, RouteLeg

logger = logging.getLogger(__name__)

# Minimum gain (meters) for a 2-opt move to count as an improvement
IMPROVEMENT_EPSILON = 1e-9


def path_length(distances: Sequence[Sequence[float]], tour: Sequence[int]) -> float:
    return sum(distances[a][b] for a, b in zip(tour, tour[1:]))


def nearest_neighbor_tour(distances: Sequence[Sequence[float]]) -> list[int]:
    """Greedy open tour from node 0. Ties go to the lowest node index."""
    n = len(distances)
    if n == 0:
        return []
    tour = [0]
    unvisited = list(range(1, n))
    current = 0
    while unvisited:
        best_pos = 0
        best_dist = distances[current][unvisited[0]]
        for pos in range(1, len(unvisited)):
            candidate = distances[current][unvisited[pos]]
            if candidate < best_dist:
                best_pos, best_dist = pos, candidate
        current = unvisited.pop(best_pos)
        tour.append(current)
    return tour


def _is_symmetric(distances: Sequence[Sequence[float]]) -> bool:
    n = len(distances)
    return all(distances[i][j] == distances[j][i] for i in range(n) for j in range(i + 1, n))


def _reversal_delta(
    distances: Sequence[Sequence[float]],
    tour: Sequence[int],
    i: int,
    j: int,
    symmetric: bool,
) -> float:
    """Cost change from reversing ``tour[i..j]`` on an open path."""
    prev, first, last = tour[i - 1], tour[i], tour[j]
    delta = distances[prev][last] - distances[prev][first]
    if j + 1 < len(tour):
        nxt = tour[j + 1]
        delta += distances[first][nxt] - distances[last][nxt]
    if not symmetric:
        # reversed segment edges change direction
        for k in range(i, j):
            delta += distances[tour[k + 1]][tour[k]] - distances[tour[k]][tour[k + 1]]
    return delta


def two_opt(
    distances: Sequence[Sequence[float]],
    tour: Iterable[int],
    *,
    max_passes: int,
    deadline: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> tuple[list[int], int, bool]:
    """Improve a copy of an open tour with first-improvement 2-opt.

    Returns ``(tour, passes, budget_exhausted)``. The tour is never longer
    than the input; when the pass cap or deadline stops the search early the
    best tour so far is returned with ``budget_exhausted`` set.
    """
    tour = list(tour)
    if len(tour) <= 2:
        return tour, 0, False

    symmetric = _is_symmetric(distances)
    last = len(tour) - 1
    passes = 0
    while True:
        if passes >= max_passes or (deadline is not None and clock() >= deadline):
            return tour, passes, True
        passes += 1
        improved = False
        for i in range(1, last):
            if deadline is not None and clock() >= deadline:
                logger.debug("2-opt deadline reached during pass %d", passes)
                return tour, passes, True
            for j in range(i + 1, last + 1):
                if _reversal_delta(distances, tour, i, j, symmetric) < -IMPROVEMENT_EPSILON:
                    tour[i : j + 1] = tour[i : j + 1][::-1]
                    improved = True
        logger.debug("2-opt pass %d: improved=%s length=%.1f", passes, improved, path_length(distances, tour))
        if not improved:
            return tour, passes, False


def _validate_budget(max_passes: int | None, time_budget_s: float | None) -> None:
    if max_passes is not None:
        if isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes < 0:
            raise InvalidArgument(f"max_passes must be a non-negative integer, got {max_passes!r}.")
    if time_budget_s is not None and not time_budget_s > 0:
        raise InvalidArgument(f"time_budget_s must be positive, got {time_budget_s!r}.")


def optimize_route(
    origin: Origin,
    stops: Sequence[Point],
    *,
    cost_model: CostModel | None = None,
    max_passes: int | None = None,
    time_budget_s: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Route:
    """Order ``stops`` into a short open path starting at ``origin``.

    Every stop appears exactly once in the result, duplicates included.
    Legs carry distance (meters) and duration (seconds) from the preceding
    stop, the origin for the first leg.

    Raises:
        InvalidArgument: the origin or a stop has invalid coordinates, or the
            budget parameters are out of range.
    """
    origin_coords = validate_coordinates(origin.latitude, origin.longitude, "origin")
    stops = list(stops)
    coordinates = [origin_coords]
    for stop in stops:
        coordinates.append(validate_coordinates(stop.latitude, stop.longitude, f"stop {stop.id!r}"))
    _validate_budget(max_passes, time_budget_s)

    if not stops:
        return Route()

    started = clock()
    deadline = started + time_budget_s if time_budget_s is not None else None
    model = cost_model or HaversineCostModel()
    matrix = model.matrix(coordinates)

    initial = nearest_neighbor_tour(matrix.distances)
    construction_m = path_length(matrix.distances, initial)
    pass_cap = max_passes if max_passes is not None else len(stops) ** 2
    tour, passes, exhausted = two_opt(
        matrix.distances, initial, max_passes=pass_cap, deadline=deadline, clock=clock
    )

    legs: List[RouteLeg] = []
    previous = 0
    for order, node in enumerate(tour[1:]):
        legs.append(
            RouteLeg(
                point=stops[node - 1],
                distance_m=matrix.distances[previous][node],
                duration_s=matrix.durations[previous][node],
                order=order,
            )
        )
        previous = node

    route = Route(
        legs=legs,
        total_distance_m=sum(leg.distance_m for leg in legs),
        total_duration_s=sum(leg.duration_s for leg in legs),
        construction_distance_m=construction_m,
        improvement_passes=passes,
        budget_exhausted=exhausted,
    )
    if exhausted:
        logger.info(
            "2-opt budget exhausted after %d passes for %d stops; returning best tour so far",
            passes, len(stops),
        )
    logger.debug(
        "Sequenced %d stops: construction=%.1fm final=%.1fm",
        len(stops), construction_m, route.total_distance_m,
    )
    return route
