from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from agroclimate.engine.analysis import analyze_weather, assess_hazards, climate_indices, detect_weather_anomalies
from agroclimate.models.enums import HazardLevel
from agroclimate.schemas.weather import WeatherObservation


def test_empty_history_gives_empty_analysis() -> None:
    analysis = analyze_weather("Harare", [], 7)
    assert analysis.data_points == 0
    assert analysis.statistics == {}
    assert analysis.indices is None
    assert analysis.hazards == []


def test_statistics_and_rain_day_counts(observation_factory) -> None:
    observations = observation_factory(datetime(2024, 1, 1, tzinfo=UTC), 10, precipitation=0.0)
    observations[3] = observations[3].model_copy(update={"precipitation": 12.0})

    analysis = analyze_weather("Harare", observations, 5)

    assert analysis.data_points == 10
    assert analysis.rainy_days == 1
    assert analysis.dry_days == 9
    assert analysis.statistics["temperature"].mean == pytest.approx(22.0)
    assert analysis.statistics["precipitation"].maximum == pytest.approx(12.0)
    assert analysis.outlook["precipitation_total"] == pytest.approx(12.0 / 7 * 5, abs=0.01)
    assert analysis.recommended_activities


def test_temperature_spike_is_an_anomaly(observation_factory) -> None:
    observations = observation_factory(datetime(2024, 1, 1, tzinfo=UTC), 30, temperature=22.0)
    spike = WeatherObservation(
        timestamp=datetime(2024, 1, 1, tzinfo=UTC) + timedelta(days=30),
        temperature=40.0,
        humidity=65.0,
    )
    anomalies = detect_weather_anomalies([*observations, spike])

    temperature_anomalies = [item for item in anomalies if item.metric == "temperature"]
    assert len(temperature_anomalies) == 1
    assert temperature_anomalies[0].value == 40.0
    assert temperature_anomalies[0].severity == HazardLevel.high
    assert temperature_anomalies[0].z_score is not None and temperature_anomalies[0].z_score > 2.5


def test_hazards_for_hot_dry_windy_spell(observation_factory) -> None:
    observations = [
        item.model_copy(update={"wind_speed": 25.0})
        for item in observation_factory(datetime(2024, 10, 1, tzinfo=UTC), 14, temperature=36.0, precipitation=0.0)
    ]
    levels = {item.hazard: item for item in assess_hazards(observations)}

    assert levels["drought"].level == HazardLevel.high
    assert levels["heat_wave"].level == HazardLevel.high
    assert levels["wind_damage"].level == HazardLevel.high
    assert levels["flood"].level == HazardLevel.low
    assert levels["flood"].mitigation == []
    assert "Use drought-resistant crop varieties" in levels["drought"].mitigation


def test_climate_indices_are_bounded(observation_factory) -> None:
    indices = climate_indices(observation_factory(datetime(2024, 1, 1, tzinfo=UTC), 7, precipitation=0.0))
    assert indices.drought_index == 1.0
    assert 0.0 <= indices.comfort_index <= 100.0
    assert indices.climate_type == "temperate"
