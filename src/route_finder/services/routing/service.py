"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...data.addresses_repository import get_points_by_ids, list_all_points
from ...errors import InvalidArgument
from ...models.domain import Origin, Point
from ...schemas.addresses import AddressModel
from ...schemas.routing import (
    NearestRequest,
    OptimizeRequest,
    OptimizeResponse,
    RankedAddressModel,
    RouteLegModel,
)
from ..ranking import find_nearest
from .cost import CostModel, build_cost_model
from .models import Route
from .sequencer import optimize_route

logger = logging.getLogger(__name__)


def find_nearest_addresses(
    payload: NearestRequest,
    catalog: Sequence[Point] | None = None,
) -> list[RankedAddressModel]:
    points = catalog if catalog is not None else list_all_points()
    ranked = find_nearest(Origin(payload.latitude, payload.longitude), points, payload.limit)
    logger.info(
        "Nearest search at (%.5f, %.5f): %d of %d addresses returned",
        payload.latitude, payload.longitude, len(ranked), len(points),
    )
    return [
        RankedAddressModel(**AddressModel.from_point(item.point).model_dump(), distance=item.distance_m)
        for item in ranked
    ]


def _resolve_stops(payload: OptimizeRequest, catalog: Sequence[Point] | None) -> list[Point]:
    if payload.stops is not None and payload.address_ids:
        raise InvalidArgument("Provide either addressIds or stops, not both.")
    if payload.stops is not None:
        return [stop.to_point() for stop in payload.stops]
    if not payload.address_ids:
        return []
    return get_points_by_ids(payload.address_ids, catalog if catalog is not None else list_all_points())


def route_to_response(route: Route) -> OptimizeResponse:
    return OptimizeResponse(
        route=[
            RouteLegModel(
                address=AddressModel.from_point(leg.point),
                distance=leg.distance_m,
                duration=leg.duration_s,
                order=leg.order,
            )
            for leg in route.legs
        ],
        total_distance=route.total_distance_m,
        total_duration=route.total_duration_s,
        budget_exhausted=route.budget_exhausted,
        improvement_passes=route.improvement_passes,
    )


def optimize_addresses(
    payload: OptimizeRequest,
    catalog: Sequence[Point] | None = None,
    cost_model: CostModel | None = None,
) -> OptimizeResponse:
    stops = _resolve_stops(payload, catalog)
    if len(stops) > settings.max_route_stops:
        raise InvalidArgument(
            f"Too many stops: {len(stops)} (maximum {settings.max_route_stops} per route)."
        )

    max_passes = payload.max_passes if payload.max_passes is not None else settings.two_opt_max_passes
    time_budget = (
        payload.time_budget_seconds
        if payload.time_budget_seconds is not None
        else settings.two_opt_time_budget_seconds
    )
    route = optimize_route(
        Origin(payload.start.lat, payload.start.lng),
        stops,
        cost_model=cost_model or build_cost_model(),
        max_passes=max_passes,
        time_budget_s=time_budget,
    )
    logger.info(
        "Optimized route with %d stops: %.1fm, %.0fs (construction %.1fm, %d passes)",
        len(route.legs), route.total_distance_m, route.total_duration_s,
        route.construction_distance_m, route.improvement_passes,
    )
    return route_to_response(route)
