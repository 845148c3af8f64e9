from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from httpx import AsyncClient

from agroclimate import main
from agroclimate.engine.agronomy import build_long_term_prediction
from agroclimate.engine.climatology import ZONES, resolve_location
from agroclimate.errors import DataUnavailableError
from agroclimate.models.enums import ClimateZone
from agroclimate.schemas.forecast import PredictionBundle
from agroclimate.schemas.prediction import AgroClimaticPrediction
from agroclimate.services.forecast_service import ForecastService
from agroclimate.services.prediction_service import PredictionService
from agroclimate.services.weather_source import WeatherSource


def _json_weather() -> dict:
    return {"timestamp": "2024-01-15T12:00:00Z", "temperature": 25.0, "humidity": 60.0, "precipitation": 2.0}


def _json_soil() -> dict:
    return {"location": "Harare", "ph": 6.5, "organic_matter": 3.0, "last_updated": "2024-01-15T00:00:00Z"}


@pytest.mark.asyncio
async def test_openapi_lists_routes(client: AsyncClient) -> None:
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/api/v1/locations" in paths
    assert "/api/v1/patterns/{location}" in paths
    assert "/api/v1/forecast/{location}/seasonal" in paths
    assert "/api/v1/forecast/{location}/long-term" in paths
    assert "/api/v1/insights/{location}" in paths
    assert "/api/v1/insights/{location}/weather-analysis" in paths
    assert "/api/v1/insights/suitability" in paths
    assert "/health/ready" in paths


@pytest.mark.asyncio
async def test_locations_endpoint(client: AsyncClient) -> None:
    response = await client.get("/api/v1/locations")
    assert response.status_code == 200
    items = response.json()["items"]
    names = [item["name"] for item in items]
    assert names == sorted(names)
    assert "Victoria Falls" in names
    harare = next(item for item in items if item["name"] == "Harare")
    assert harare["climate_zone"] == "highveld"


@pytest.mark.asyncio
async def test_seasonal_forecast_endpoint(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/forecast/harare/seasonal",
        params={"months": 6, "enso_status": "el_nino", "reference_date": "2024-11-01", "use_recent_observations": "false"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["algorithm"] == "RBSWSA"
    assert body["location"] == "Harare"
    assert body["climate_zone"] == "highveld"
    assert body["enso_status"] == "el_nino"
    assert len(body["monthly_predictions"]) == 6
    assert body["drought_risk"]["risk_level"] in {"low", "medium", "high"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("path", "params", "status_code"),
    [
        ("/api/v1/forecast/atlantis/seasonal", {"use_recent_observations": "false"}, 404),
        ("/api/v1/forecast/harare/seasonal", {"months": 30, "use_recent_observations": "false"}, 400),
        ("/api/v1/forecast/harare/seasonal", {"enso_status": "strong", "use_recent_observations": "false"}, 400),
        ("/api/v1/forecast/harare/seasonal", {"climate_zone": "tundra", "use_recent_observations": "false"}, 400),
        ("/api/v1/forecast/harare/seasonal", {"months": "six"}, 422),
    ],
)
async def test_seasonal_forecast_error_mapping(client: AsyncClient, path: str, params: dict, status_code: int) -> None:
    response = await client.get(path, params=params)
    assert response.status_code == status_code


@pytest.mark.asyncio
async def test_seasonal_forecast_upstream_failure_is_503(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_fetch(self: WeatherSource, _location: str, _start: date, _end: date) -> list:
        raise DataUnavailableError("weather archive", "no response within 20.0s")

    monkeypatch.setattr(WeatherSource, "fetch_observations", fake_fetch)

    response = await client.get("/api/v1/forecast/harare/seasonal")
    assert response.status_code == 503
    assert "weather archive unavailable" in response.json()["detail"]


@pytest.mark.asyncio
async def test_seasonal_forecast_bad_parameters_win_over_upstream_outage(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def fake_fetch(self: WeatherSource, _location: str, _start: date, _end: date) -> list:
        raise DataUnavailableError("weather archive", "connection refused")

    monkeypatch.setattr(WeatherSource, "fetch_observations", fake_fetch)

    response = await client.get("/api/v1/forecast/harare/seasonal", params={"climate_zone": "tundra"})
    assert response.status_code == 400
    assert "unknown climate zone" in response.json()["detail"]


@pytest.mark.asyncio
async def test_seasonal_forecast_unexpected_error_is_500(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_generate(self: ForecastService, *_args: object, **_kwargs: object) -> PredictionBundle:
        raise RuntimeError("boom")

    monkeypatch.setattr(ForecastService, "generate_seasonal_prediction", fake_generate)

    response = await client.get("/api/v1/forecast/harare/seasonal")
    assert response.status_code == 500
    assert response.json()["detail"] == "forecast failure"


@pytest.mark.asyncio
async def test_long_term_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    async def fake_generate(self: PredictionService, location: str, start_date: date, days_ahead: int) -> AgroClimaticPrediction:
        captured.update(location=location, start_date=start_date, days_ahead=days_ahead)
        return build_long_term_prediction(
            resolve_location(location), ZONES[ClimateZone.highveld], start_date, days_ahead, [], None
        )

    monkeypatch.setattr(PredictionService, "generate_long_term_prediction", fake_generate)

    response = await client.get("/api/v1/forecast/harare/long-term", params={"days_ahead": 30, "start_date": "2024-01-01"})
    assert response.status_code == 200
    assert captured == {"location": "harare", "start_date": date(2024, 1, 1), "days_ahead": 30}
    body = response.json()
    assert body["date"] == "2024-01-31"
    assert body["pest_risk"]["level"] in {"low", "medium", "high", "critical"}


@pytest.mark.asyncio
async def test_long_term_endpoint_alert_publish_failure_is_503(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_generate(self: PredictionService, location: str, start_date: date, days_ahead: int) -> AgroClimaticPrediction:
        raise DataUnavailableError("notifications", "publish failed: connection lost")

    monkeypatch.setattr(PredictionService, "generate_long_term_prediction", fake_generate)

    response = await client.get("/api/v1/forecast/harare/long-term", params={"days_ahead": 0})
    assert response.status_code == 503
    assert response.json()["detail"].startswith("notifications unavailable")


@pytest.mark.asyncio
async def test_patterns_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, summer_observations) -> None:
    async def fake_fetch(self: WeatherSource, _location: str, _start: date, _end: date) -> list:
        return summer_observations

    monkeypatch.setattr(WeatherSource, "fetch_observations", fake_fetch)

    response = await client.get(
        "/api/v1/patterns/harare", params={"start_date": "2023-12-01", "end_date": "2024-02-29"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["observation_count"] == 91
    assert body["patterns"][0]["season"] == "summer"
    assert body["patterns"][0]["season_year"] == 2024
    assert [item["month"] for item in body["monthly_patterns"]] == [12, 1, 2]


@pytest.mark.asyncio
async def test_patterns_endpoint_validation(client: AsyncClient) -> None:
    missing = await client.get("/api/v1/patterns/harare", params={"start_date": "2024-01-01"})
    assert missing.status_code == 422

    reversed_range = await client.get(
        "/api/v1/patterns/harare", params={"start_date": "2024-02-01", "end_date": "2024-01-01"}
    )
    assert reversed_range.status_code == 400


@pytest.mark.asyncio
async def test_suitability_endpoint(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/insights/suitability",
        json={"crop": "maize", "soil_data": _json_soil(), "weather": _json_weather()},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["suitability"] == 100
    assert body["recommendation"]["variety"] == "SC 403"


@pytest.mark.asyncio
async def test_insights_endpoint(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/insights/harare",
        json={"current_weather": _json_weather(), "soil_data": _json_soil(), "growth_stage": "flowering"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["crop"] == "maize"
    assert body["crop_recommendations"][0]["name"] == "Maize"
    assert body["irrigation_advice"]["priority"] == "critical"
    assert body["advisor_note"]


@pytest.mark.asyncio
async def test_insights_endpoint_unknown_location_and_bad_stage(client: AsyncClient) -> None:
    unknown = await client.post("/api/v1/insights/atlantis", json={})
    assert unknown.status_code == 404

    bad_stage = await client.post("/api/v1/insights/harare", json={"growth_stage": "sprouting"})
    assert bad_stage.status_code == 422


@pytest.mark.asyncio
async def test_weather_analysis_endpoint(client: AsyncClient) -> None:
    history = [
        {
            "timestamp": datetime(2024, 1, day, tzinfo=UTC).isoformat(),
            "temperature": 20.0 + day * 0.2,
            "humidity": 60.0,
            "precipitation": 5.0 if day % 3 == 0 else 0.0,
        }
        for day in range(10, 0, -1)
    ]
    response = await client.post("/api/v1/insights/harare/weather-analysis", json={"historical_data": history, "days_ahead": 5})
    assert response.status_code == 200
    body = response.json()
    assert body["data_points"] == 10
    assert body["rainy_days"] == 3
    assert body["trends"]["temperature_trend"] == pytest.approx(0.2, abs=1e-6)
    assert {item["hazard"] for item in body["hazards"]} == {"drought", "flood", "heat_wave", "frost", "wind_damage"}


@pytest.mark.asyncio
async def test_weather_analysis_accepts_mixed_naive_and_utc_timestamps(client: AsyncClient) -> None:
    history = [
        {"timestamp": "2024-01-02T00:00:00Z", "temperature": 23.0, "humidity": 60.0},
        {"timestamp": "2024-01-01T00:00:00", "temperature": 21.0, "humidity": 62.0, "precipitation": 4.0},
        {"timestamp": "2024-01-03T00:00:00+02:00", "temperature": 25.0, "humidity": 58.0},
    ]
    response = await client.post("/api/v1/insights/Harare/weather-analysis", json={"historical_data": history})
    assert response.status_code == 200
    body = response.json()
    assert body["data_points"] == 3
    assert body["rainy_days"] == 1
    assert body["statistics"]["temperature"]["mean"] == pytest.approx(23.0)


# ── System ──────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health_ready_ok(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def _ok(_app):
        return {"redis": {"ok": True, "message": "ok"}}

    monkeypatch.setattr(main, "_run_readiness_checks", _ok)

    response = await client.get("/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["checks"]["redis"]["ok"] is True


@pytest.mark.asyncio
async def test_health_ready_degraded_without_redis(client: AsyncClient) -> None:
    response = await client.get("/health/ready")
    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "degraded"
    assert body["checks"]["redis"]["message"] == "not connected"


@pytest.mark.asyncio
async def test_health_ready_when_redis_disabled(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_ENABLED", "false")
    main.get_settings.cache_clear()

    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["redis"]["message"] == "disabled"


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: AsyncClient) -> None:
    request_id = "agroclimate-request-id"
    response = await client.get("/health", headers={"x-request-id": request_id})
    assert response.status_code == 200
    assert response.headers.get("x-request-id") == request_id


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["service"] == "agroclimate"
    generated = response.headers.get("x-request-id")
    assert generated is not None
    assert len(generated) >= 8
