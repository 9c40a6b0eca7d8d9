"""Address catalog API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..models.domain import Point


class AddressModel(BaseModel):
    id: str
    name: str
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = "USA"
    notes: Optional[str] = None
    latitude: float
    longitude: float

    @classmethod
    def from_point(cls, point: Point) -> "AddressModel":
        return cls(
            id=point.id,
            name=point.name,
            street=point.street,
            city=point.city,
            state=point.state,
            zipCode=point.zip_code,
            country=point.country,
            notes=point.notes,
            latitude=point.latitude,
            longitude=point.longitude,
        )

    def to_point(self) -> Point:
        return Point(
            id=self.id,
            name=self.name,
            latitude=self.latitude,
            longitude=self.longitude,
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zipCode,
            country=self.country,
            notes=self.notes,
        )
