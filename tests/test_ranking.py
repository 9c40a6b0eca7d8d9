import random

import pytest

from route_finder.errors import InvalidArgument
from route_finder.models.domain import Origin, Point
from route_finder.services.ranking import find_nearest


def _point(pid: str, lat: float, lon: float) -> Point:
    return Point(id=pid, name=f"Address {pid}", latitude=lat, longitude=lon, city="Vancouver", state="BC")


def _catalog(count: int, seed: int = 7) -> list[Point]:
    rng = random.Random(seed)
    return [
        _point(f"A{i}", 49.2827 + rng.uniform(-0.25, 0.25), -123.1207 + rng.uniform(-0.25, 0.25))
        for i in range(count)
    ]


def test_equator_points_tie_and_keep_catalog_order():
    catalog = [_point("lon1", 0.0, 1.0), _point("lon2", 0.0, 2.0), _point("lat1", 1.0, 0.0)]

    result = find_nearest(Origin(0.0, 0.0), catalog, 2)

    assert {item.point.id for item in result} == {"lon1", "lat1"}
    # one degree of latitude and one of longitude on the equator are the same haversine distance
    assert result[0].distance_m == result[1].distance_m
    assert [item.point.id for item in result] == ["lon1", "lat1"]

    reordered = find_nearest(Origin(0.0, 0.0), [catalog[2], catalog[1], catalog[0]], 2)
    assert [item.point.id for item in reordered] == ["lat1", "lon1"]


@pytest.mark.parametrize("limit", [1, 2, 5, 20, 50, 1000])
def test_result_size_is_min_of_limit_and_catalog(limit):
    catalog = _catalog(50)
    result = find_nearest(Origin(49.28, -123.12), catalog, limit)
    assert len(result) == min(limit, len(catalog))


def test_distances_are_non_decreasing_and_points_come_from_catalog():
    catalog = _catalog(200)
    result = find_nearest(Origin(49.25, -123.0), catalog, 25)

    distances = [item.distance_m for item in result]
    assert distances == sorted(distances)
    assert all(item.point in catalog for item in result)


def test_partial_selection_matches_full_sort():
    catalog = _catalog(300, seed=11)
    origin = Origin(49.3, -123.1)
    everything = find_nearest(origin, catalog, len(catalog))
    top = find_nearest(origin, catalog, 10)
    assert top == everything[:10]


def test_point_at_origin_ranks_first_with_zero_distance():
    catalog = _catalog(10) + [_point("HERE", 49.2827, -123.1207)]
    result = find_nearest(Origin(49.2827, -123.1207), catalog, 3)
    assert result[0].point.id == "HERE"
    assert result[0].distance_m == 0.0


def test_empty_catalog_returns_empty_list():
    assert find_nearest(Origin(0.0, 0.0), [], 5) == []


@pytest.mark.parametrize("limit", [0, -1, 2.5, True])
def test_invalid_limit_raises(limit):
    with pytest.raises(InvalidArgument):
        find_nearest(Origin(0.0, 0.0), _catalog(3), limit)


def test_zero_limit_raises_even_for_empty_catalog():
    with pytest.raises(InvalidArgument):
        find_nearest(Origin(0.0, 0.0), [], 0)


def test_invalid_origin_raises():
    with pytest.raises(InvalidArgument):
        find_nearest(Origin(95.0, 0.0), _catalog(3), 1)


def test_invalid_catalog_point_raises():
    catalog = _catalog(3) + [_point("BAD", 0.0, 200.0)]
    with pytest.raises(InvalidArgument):
        find_nearest(Origin(0.0, 0.0), catalog, 1)


def test_custom_distance_function_is_used():
    catalog = [_point("A", 0.0, 1.0), _point("B", 0.0, 2.0)]

    def reversed_distance(lat1, lon1, lat2, lon2):
        return -abs(lon2 - lon1)

    result = find_nearest(Origin(0.0, 0.0), catalog, 1, distance=reversed_distance)
    assert result[0].point.id == "B"
