from __future__ import annotations

from datetime import UTC, datetime

import pytest

from agroclimate.engine.suitability import (
	DEFAULT_TIME_OF_DAY,
	calculate_suitability,
	create_crop_recommendation,
	irrigation_schedule,
	irrigation_schedules,
	recommend_crops,
)
from agroclimate.models.enums import GrowthStage, IrrigationPriority
from agroclimate.schemas.weather import SoilData, WeatherObservation


def _weather(temperature: float) -> WeatherObservation:
    return WeatherObservation(timestamp=datetime(2024, 1, 15, tzinfo=UTC), temperature=temperature, humidity=60.0)


def _soil(ph: float, organic_matter: float) -> SoilData:
    return SoilData(location="Harare", ph=ph, organic_matter=organic_matter, last_updated=datetime(2024, 1, 15, tzinfo=UTC))


def test_maize_in_ideal_conditions_scores_full_marks(loam_soil: SoilData, current_weather: WeatherObservation) -> None:
    assert calculate_suitability("maize", loam_soil, current_weather) == 100
    assert calculate_suitability("Maize", loam_soil, current_weather) == 100


def test_unknown_crop_gets_generic_recommendation(loam_soil: SoilData, current_weather: WeatherObservation) -> None:
    recommendation = create_crop_recommendation("Quinoa", loam_soil, current_weather)

    assert recommendation.name == "Quinoa"
    assert recommendation.variety == "Local variety"
    assert recommendation.planting_date == "Season dependent"
    assert 0 <= recommendation.suitability <= 100


def test_known_crop_uses_catalog(loam_soil: SoilData, current_weather: WeatherObservation) -> None:
    recommendation = create_crop_recommendation("maize", loam_soil, current_weather)
    assert recommendation.name == "Maize"
    assert recommendation.variety == "SC 403"
    assert recommendation.suitability == 100


def test_without_weather_there_is_no_temperature_bonus(loam_soil: SoilData) -> None:
    assert calculate_suitability("maize", loam_soil, None) == 85


@pytest.mark.parametrize("crop", ["maize", "wheat", "sorghum", "cotton", "tobacco", "quinoa"])
@pytest.mark.parametrize("ph", [0.0, 4.5, 6.5, 9.0, 14.0])
@pytest.mark.parametrize("temperature", [-10.0, 12.0, 25.0, 45.0])
def test_suitability_is_bounded(crop: str, ph: float, temperature: float) -> None:
    score = calculate_suitability(crop, _soil(ph, 1.0), _weather(temperature))
    assert 0 <= score <= 100


def test_poor_soil_and_cold_weather_keep_base_score() -> None:
    assert calculate_suitability("maize", _soil(3.0, 0.5), _weather(5.0)) == 50


def test_recommend_crops_is_ranked_and_needs_both_inputs(
    loam_soil: SoilData, current_weather: WeatherObservation
) -> None:
    ranked = recommend_crops(["wheat", "maize", "quinoa"], loam_soil, current_weather)
    assert [item.suitability for item in ranked] == sorted((item.suitability for item in ranked), reverse=True)
    assert ranked[0].name == "Maize"

    assert recommend_crops(["maize"], None, current_weather) == []
    assert recommend_crops(["maize"], loam_soil, None) == []


def test_vegetative_schedule_baseline(loam_soil: SoilData, current_weather: WeatherObservation) -> None:
    schedule = irrigation_schedule("maize", GrowthStage.vegetative, loam_soil, current_weather)

    assert schedule.frequency == "Every 3-4 days"
    assert schedule.amount == "15-20mm"
    assert schedule.priority == IrrigationPriority.high
    assert schedule.time_of_day == DEFAULT_TIME_OF_DAY
    assert schedule.tips == ["Monitor soil moisture regularly", "Water deeply to encourage root growth"]


def test_schedule_adjusts_for_heat_cold_and_soil() -> None:
    hot = irrigation_schedule("maize", GrowthStage.maturity, _soil(6.5, 3.0), _weather(33.0))
    assert hot.frequency == "Every 2-3 days"
    assert "Increase frequency during hot weather" in hot.tips

    cold = irrigation_schedule("maize", GrowthStage.planting, _soil(6.5, 3.0), _weather(10.0))
    assert cold.frequency == "Every 5-7 days"
    assert "Reduce frequency during cool weather" in cold.tips

    poor = irrigation_schedule("maize", GrowthStage.flowering, _soil(5.5, 1.0), None)
    assert poor.priority == IrrigationPriority.critical
    assert "Monitor soil pH and adjust irrigation accordingly" in poor.tips
    assert "Consider adding organic matter to improve water retention" in poor.tips


def test_schedules_cover_every_growth_stage(loam_soil: SoilData, current_weather: WeatherObservation) -> None:
    schedules = irrigation_schedules("maize", loam_soil, current_weather)
    assert [item.growth_stage for item in schedules] == list(GrowthStage)
