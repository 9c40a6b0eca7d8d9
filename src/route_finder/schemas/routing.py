"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from .addresses import AddressModel


class StartLocation(BaseModel):
    lat: float
    lng: float


class NearestRequest(BaseModel):
    latitude: float
    longitude: float
    limit: int = Field(default=settings.default_limit, description="Number of addresses to return.")


class RankedAddressModel(AddressModel):
    distance: float = Field(..., description="Great-circle distance from the origin in meters.")


class OptimizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: StartLocation
    address_ids: List[Union[str, int]] = Field(
        default_factory=list,
        alias="addressIds",
        description="Catalog ids to visit, typically the output of /routes/nearest.",
    )
    stops: Optional[List[AddressModel]] = Field(
        default=None,
        description="Inline stops to sequence instead of catalog ids.",
    )
    max_passes: Optional[int] = Field(default=None, description="Cap on 2-opt improvement passes.")
    time_budget_seconds: Optional[float] = Field(default=None, description="Wall-clock cap on improvement.")


class RouteLegModel(BaseModel):
    address: AddressModel
    distance: float = Field(..., description="Meters from the previous stop.")
    duration: float = Field(..., description="Seconds from the previous stop.")
    order: int


class OptimizeResponse(BaseModel):
    route: List[RouteLegModel]
    total_distance: float
    total_duration: float
    budget_exhausted: bool = False
    improvement_passes: int = 0
