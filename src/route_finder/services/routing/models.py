"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...models.domain import Point


@dataclass(frozen=True, slots=True)
class RouteLeg:
    point: Point
    distance_m: float
    duration_s: float
    order: int


@dataclass(slots=True)
class Route:
    legs: List[RouteLeg] = field(default_factory=list)
    total_distance_m: float = 0.0
    total_duration_s: float = 0.0
    construction_distance_m: float = 0.0
    improvement_passes: int = 0
    budget_exhausted: bool = False
