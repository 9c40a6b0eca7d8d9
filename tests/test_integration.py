import pytest
from fastapi.testclient import TestClient

from route_finder.main import create_app
from route_finder.models.domain import Point


def _point(pid: str, name: str, lat: float, lon: float) -> Point:
    return Point(id=pid, name=name, latitude=lat, longitude=lon, street=f"{pid} Main St", city="Vancouver", state="BC")


CATALOG = (
    _point("1", "Bank 1", 0.0, 1.0),
    _point("2", "Cafe 2", 0.0, 2.0),
    _point("3", "Gym 3", 1.0, 0.0),
    _point("4", "Office 4", 3.0, 3.0),
)


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from route_finder.api.routes import addresses as addresses_api
    from route_finder.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "list_all_points", lambda: CATALOG)
    monkeypatch.setattr(addresses_api, "list_all_points", lambda: CATALOG)
    return TestClient(create_app())


def test_root_reports_map_center(api_client: TestClient):
    response = api_client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "running"
    assert payload["map_center"] == {"lat": 49.2827, "lng": -123.1207}


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_addresses(api_client: TestClient):
    response = api_client.get("/api/addresses")
    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload] == ["1", "2", "3", "4"]
    assert payload[0]["street"] == "1 Main St"
    assert payload[0]["zipCode"] is None


def test_nearest_endpoint(api_client: TestClient):
    response = api_client.post("/api/routes/nearest", json={"latitude": 0.0, "longitude": 0.0, "limit": 2})

    assert response.status_code == 200
    payload = response.json()
    assert {item["id"] for item in payload} == {"1", "3"}
    assert payload[0]["distance"] == pytest.approx(payload[1]["distance"])


def test_nearest_endpoint_rejects_zero_limit(api_client: TestClient):
    response = api_client.post("/api/routes/nearest", json={"latitude": 0.0, "longitude": 0.0, "limit": 0})
    assert response.status_code == 400
    assert "limit" in response.json()["detail"]


def test_nearest_endpoint_rejects_out_of_range_origin(api_client: TestClient):
    response = api_client.post("/api/routes/nearest", json={"latitude": 120.0, "longitude": 0.0, "limit": 2})
    assert response.status_code == 400


def test_optimize_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "addressIds": ["2", "1"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert [leg["address"]["id"] for leg in payload["route"]] == ["1", "2"]
    assert [leg["order"] for leg in payload["route"]] == [0, 1]
    assert payload["route"][0]["distance"] > 0
    assert payload["route"][0]["duration"] > 0
    assert payload["budget_exhausted"] is False


def test_optimize_endpoint_empty_ids(api_client: TestClient):
    response = api_client.post("/api/routes/optimize", json={"start": {"lat": 0.0, "lng": 0.0}, "addressIds": []})
    assert response.status_code == 200
    assert response.json()["route"] == []


def test_optimize_endpoint_unknown_id(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "addressIds": ["1", "404"]},
    )
    assert response.status_code == 400
    assert "404" in response.json()["detail"]


def test_optimize_endpoint_invalid_start(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 999.0}, "addressIds": ["1"]},
    )
    assert response.status_code == 400


def test_optimize_endpoint_integer_ids(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "addressIds": [3, 1]},
    )
    assert response.status_code == 200
    assert sorted(leg["address"]["id"] for leg in response.json()["route"]) == ["1", "3"]


def test_osrm_health_when_not_configured(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from route_finder.config import settings

    monkeypatch.setattr(settings, "osrm_base_url", None)
    response = api_client.get("/api/health/osrm")
    assert response.status_code == 200
    assert response.json()["configured"] is False


def _missing_catalog():
    raise FileNotFoundError("Address file not found: missing.csv")


def test_nearest_endpoint_missing_catalog_file(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from route_finder.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "list_all_points", _missing_catalog)
    response = api_client.post("/api/routes/nearest", json={"latitude": 0.0, "longitude": 0.0, "limit": 2})
    assert response.status_code == 404
    assert "missing.csv" in response.json()["detail"]


def test_optimize_endpoint_missing_catalog_file(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from route_finder.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "list_all_points", _missing_catalog)
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "addressIds": ["1"]},
    )
    assert response.status_code == 404
    assert "missing.csv" in response.json()["detail"]


@pytest.mark.parametrize("status_code,healthy", [(200, True), (503, False)])
def test_osrm_health_when_configured(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch, status_code: int, healthy: bool
):
    import httpx

    from route_finder.config import settings
    from route_finder.services.routing import osrm_client

    def fake_get(url, params=None, timeout=None):
        return httpx.Response(
            status_code, json={"code": "Ok", "durations": [[0, 5], [5, 0]]}, request=httpx.Request("GET", url)
        )

    monkeypatch.setattr(settings, "osrm_base_url", "http://osrm.local:5000")
    monkeypatch.setattr(osrm_client.httpx, "get", fake_get)
    response = api_client.get("/api/health/osrm")
    assert response.status_code == 200
    payload = response.json()
    assert payload["configured"] is True
    assert payload["healthy"] is healthy
