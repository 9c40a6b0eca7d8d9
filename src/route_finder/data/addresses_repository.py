"""Address catalog loader with database-first approach, falling back to a CSV file."""

from __future__ import annotations

import csv
import functools
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import InvalidArgument
from ..models.domain import Point
from ..services.geospatial import validate_coordinates

logger = logging.getLogger(__name__)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _text(row: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _row_to_point(row: Mapping[str, Any], fallback_id: str) -> Optional[Point]:
    """Build a Point from a catalog row, or None when its coordinates are unusable."""
    try:
        lat = _coerce_float(row.get("latitude", row.get("Latitude")))
        lon = _coerce_float(row.get("longitude", row.get("Longitude")))
    except ValueError as exc:
        logger.warning("Skipping address %s: %s", fallback_id, exc)
        return None
    if lat is None or lon is None:
        logger.warning("Skipping address %s without coordinates", fallback_id)
        return None
    try:
        lat, lon = validate_coordinates(lat, lon, f"address {fallback_id}")
    except InvalidArgument as exc:
        logger.warning("Skipping address %s: %s", fallback_id, exc)
        return None

    return Point(
        id=_text(row, "id", "Id", "ID") or fallback_id,
        name=_text(row, "name", "Name") or "",
        latitude=lat,
        longitude=lon,
        street=_text(row, "street", "Street"),
        city=_text(row, "city", "City"),
        state=_text(row, "state", "State"),
        zip_code=_text(row, "zip_code", "zipCode", "ZipCode"),
        country=_text(row, "country", "Country") or "USA",
        notes=_text(row, "notes", "Notes"),
    )


def _sorted_by_name(points: Iterable[Point]) -> tuple[Point, ...]:
    return tuple(sorted(points, key=lambda point: point.name))


def _load_addresses_from_database() -> tuple[Point, ...] | None:
    """Load addresses from Supabase. Returns None if the database is not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = (
            supabase.table(settings.supabase_addresses_table)
            .select("*")
            .order("name")
            .execute()
        )
    except Exception as e:
        # If the query fails, fall back to the file
        logger.warning("Address query failed, falling back to file: %s", e)
        return None

    if not response.data:
        return None

    points = [
        point
        for index, row in enumerate(response.data, start=1)
        if (point := _row_to_point(row, str(index))) is not None
    ]
    return _sorted_by_name(points) if points else None


@functools.lru_cache(maxsize=1)
def load_addresses(source: Optional[Path] = None) -> tuple[Point, ...]:
    """Load addresses from the configured CSV file."""

    csv_path = source or settings.address_file
    if not csv_path.exists():
        raise FileNotFoundError(f"Address file not found: {csv_path}")

    points: list[Point] = []
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Address file '{csv_path}' is missing a header row.")
        for index, row in enumerate(reader, start=1):
            point = _row_to_point(row, str(index))
            if point is not None:
                points.append(point)
    logger.info("Loaded %d addresses from %s", len(points), csv_path)
    return _sorted_by_name(points)


def list_all_points(source: Optional[Path] = None) -> tuple[Point, ...]:
    """Return the whole catalog ordered by name, database first."""
    db_points = _load_addresses_from_database()
    if db_points:
        return db_points
    return load_addresses(source)


def get_points_by_ids(ids: Sequence[str | int], catalog: Sequence[Point] | None = None) -> list[Point]:
    """Resolve ids against the catalog, keeping request order and duplicates."""
    points = catalog if catalog is not None else list_all_points()
    lookup: dict[str, Point] = {}
    for point in points:
        lookup.setdefault(point.id, point)

    missing = [str(item) for item in ids if str(item) not in lookup]
    if missing:
        raise InvalidArgument(f"Unknown address ids: {', '.join(missing)}")
    return [lookup[str(item)] for item in ids]
