"""Tests for the HTTP wrapper: search, trace, benchmark and geocode endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi import status

from app.core.errors import GeocodingError, PoiServiceError
from app.core.geo import offset_point
from app.schemas.places import GeocodeResult, Poi
from tests.conftest import MUNICH


def _point(north_m, east_m, id=None):
    p = offset_point(MUNICH, north_m, east_m)
    return {"lat": p.lat, "lon": p.lon, "id": id}


def _search_body(radius_m=500.0):
    return {
        "points": [
            _point(0, 0, "center"),
            _point(100, 100, "near"),
            _point(2000, 0, "far"),
            _point(-300, 0, 7),
        ],
        "center": {"lat": MUNICH.lat, "lon": MUNICH.lon},
        "radius_m": radius_m,
    }


def test_root_and_health(client):
    assert client.get("/").status_code == status.HTTP_200_OK
    response = client.get("/health")
    assert response.json() == {"status": "healthy"}


def test_radius_search(client):
    response = client.post("/api/v1/search/radius", json=_search_body())
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["count"] == 4
    assert data["kd_matches"] == [0, 1, 3]
    assert data["lin_matches"] == [0, 1, 3]
    assert [m["id"] for m in data["matches"]] == ["center", "near", 7]
    assert data["matches"][0]["distance_m"] == 0.0
    assert data["lin_visited"] == 4
    assert 1 <= data["kd_visited"] <= 4
    assert set(data["timings"]) == {"build_ms", "kd_ms", "lin_ms"}


def test_radius_search_empty_points(client):
    body = _search_body()
    body["points"] = []
    response = client.post("/api/v1/search/radius", json=body)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["matches"] == []
    assert data["kd_visited"] == 0


def test_radius_search_rejects_invalid_input(client):
    body = _search_body()
    body["center"]["lat"] = 90.0
    assert client.post("/api/v1/search/radius", json=body).status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    body = _search_body(radius_m=-5.0)
    assert client.post("/api/v1/search/radius", json=body).status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_search_trace(client):
    response = client.post("/api/v1/search/trace", json=_search_body())
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["visited"] == len(data["steps"])
    assert data["match_count"] == 3
    assert [s["visit_id"] for s in data["steps"]] == list(range(1, data["visited"] + 1))
    assert {s["id"] for s in data["steps"] if s["within"]} == {"center", "near", 7}
    assert 0.0 <= data["pruned_pct"] < 100.0


def _pois():
    return [
        Poi(id=10, lat=MUNICH.lat, lon=MUNICH.lon),
        Poi(id=11, lat=offset_point(MUNICH, 500, 0).lat, lon=MUNICH.lon),
        Poi(id=12, lat=offset_point(MUNICH, 4000, 0).lat, lon=MUNICH.lon),
    ]


def test_benchmark_with_fetched_pois(client):
    with patch(
        "app.services.overpass_client.fetch_pois",
        new_callable=AsyncMock,
        return_value=_pois(),
    ) as mock_fetch:
        response = client.post(
            "/api/v1/benchmark",
            json={"center_lat": MUNICH.lat, "center_lon": MUNICH.lon, "radius_m": 1500, "iterations": 2},
        )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["count"] == 3
    assert sorted(data["inside"]) == [10, 11]
    assert data["outside"] == [12]
    assert data["kd_inside_count"] == data["lin_inside_count"] == 2
    assert data["lin_visited"] == 3
    assert data["stats"]["build"]["n"] == 2
    assert mock_fetch.await_args.args[2] == 5000.0


def test_benchmark_upstream_error_returns_502(client):
    error = PoiServiceError("HTTP 429", status_code=429, body_preview="<html>slow down</html>")
    with patch("app.services.overpass_client.fetch_pois", new_callable=AsyncMock, side_effect=error):
        response = client.post("/api/v1/benchmark", json={})

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    detail = response.json()["detail"]
    assert detail["error"] == "overpass_error"
    assert detail["status"] == 429
    assert detail["body"] == "<html>slow down</html>"


def test_benchmark_upstream_timeout_returns_504(client):
    error = PoiServiceError("request timed out", timeout=True)
    with patch("app.services.overpass_client.fetch_pois", new_callable=AsyncMock, side_effect=error):
        response = client.post("/api/v1/benchmark", json={})

    assert response.status_code == status.HTTP_504_GATEWAY_TIMEOUT
    assert response.json()["detail"]["error"] == "overpass_timeout"


def test_geocode(client):
    results = [GeocodeResult(display_name="Marienplatz", lat=48.1373, lon=11.5754)]
    with patch("app.services.geocoding_client.search", new_callable=AsyncMock, return_value=results):
        response = client.get("/api/v1/geocode", params={"q": "Marienplatz"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"results": [{"display_name": "Marienplatz", "lat": 48.1373, "lon": 11.5754}]}


def test_geocode_failure_returns_502(client):
    with patch(
        "app.services.geocoding_client.search",
        new_callable=AsyncMock,
        side_effect=GeocodingError("HTTP 503", status_code=503),
    ):
        response = client.get("/api/v1/geocode", params={"q": "nowhere"})

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"]["error"] == "nominatim_error"


def test_geocode_requires_query(client):
    assert client.get("/api/v1/geocode").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_benchmark_measures_in_threadpool(client):
    from fastapi.concurrency import run_in_threadpool

    from app.routers import benchmark as benchmark_router

    with (
        patch("app.services.overpass_client.fetch_pois", new_callable=AsyncMock, return_value=_pois()),
        patch("app.routers.benchmark.run_in_threadpool", side_effect=run_in_threadpool) as pool,
    ):
        response = client.post("/api/v1/benchmark", json={"iterations": 1})

    assert response.status_code == status.HTTP_200_OK
    pool.assert_awaited_once()
    assert pool.await_args.args[0] is benchmark_router._measure


def test_radius_search_echoes_tags(client):
    body = _search_body()
    body["points"][1]["tags"] = {"name": "Cafe", "stars": 4}
    response = client.post("/api/v1/search/radius", json=body)

    assert response.status_code == status.HTTP_200_OK
    matches = {m["id"]: m for m in response.json()["matches"]}
    assert matches["near"]["tags"] == {"name": "Cafe", "stars": 4}
    assert matches["center"]["tags"] == {}


def test_search_trace_echoes_tags(client):
    body = _search_body()
    body["points"][0]["tags"] = {"name": "Marienplatz"}
    response = client.post("/api/v1/search/trace", json=body)

    steps = {s["id"]: s for s in response.json()["steps"]}
    assert steps["center"]["tags"] == {"name": "Marienplatz"}
