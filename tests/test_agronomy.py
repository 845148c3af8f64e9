from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from agroclimate.engine.agronomy import (
	assess_pest_disease,
	best_crop,
	build_long_term_prediction,
	farming_calendar,
	is_critical_alert,
	weather_alerts,
	yield_prediction,
)
from agroclimate.engine.climatology import ZONES, resolve_location
from agroclimate.engine.patterns import analyze_patterns
from agroclimate.models.enums import ClimateZone, GrowthStage, HazardLevel, Trend
from agroclimate.schemas.weather import WeatherObservation

HARARE = resolve_location("Harare")
HIGHVELD = ZONES[ClimateZone.highveld]


def _weather(temperature: float, humidity: float, precipitation: float = 0.0) -> WeatherObservation:
	return WeatherObservation(
		timestamp=datetime(2024, 1, 15, tzinfo=UTC),
		temperature=temperature,
		humidity=humidity,
		precipitation=precipitation,
	)


def test_pest_risk_escalates_during_flowering() -> None:
	weather = _weather(30.0, 80.0)
	vegetative = assess_pest_disease("maize", GrowthStage.vegetative, weather)
	flowering = assess_pest_disease("maize", GrowthStage.flowering, weather)

	assert vegetative.pest_risk.level == HazardLevel.high
	assert flowering.pest_risk.level == HazardLevel.critical
	assert flowering.pest_risk.severity == 1.0
	assert flowering.monitoring_schedule == "Twice-weekly field inspections"


def test_disease_risk_tracks_humidity_and_rain() -> None:
	assert assess_pest_disease("maize", GrowthStage.vegetative, _weather(20.0, 95.0, 25.0)).disease_risk.level == HazardLevel.critical
	assert assess_pest_disease("maize", GrowthStage.vegetative, _weather(20.0, 85.0, 8.0)).disease_risk.level == HazardLevel.high
	assert assess_pest_disease("maize", GrowthStage.vegetative, _weather(20.0, 50.0, 0.0)).disease_risk.level == HazardLevel.low


def test_unknown_crop_gets_generic_prevention() -> None:
	assessment = assess_pest_disease("quinoa", GrowthStage.vegetative, _weather(20.0, 50.0))
	assert assessment.prevention == ["Regular field monitoring", "Good field hygiene"]
	assert assessment.monitoring_schedule == "Regular field inspections"


def test_weather_alerts_and_criticality() -> None:
	alerts = weather_alerts(37.0, 20.0, 0.0)
	assert alerts == ["High temperature warning", "Drought conditions"]
	assert all(is_critical_alert(alert) for alert in alerts)
	assert weather_alerts(2.0, 50.0, 0.0) == ["Frost warning"]
	assert not is_critical_alert("Heavy rainfall expected")


def test_best_crop_and_yield() -> None:
	assert best_crop(21.5, 66.0, 5.6) == "maize"
	assert yield_prediction("maize", 21.5, 66.0, 5.6) == 100.0
	assert yield_prediction("wheat", 35.0, 90.0, 0.0) == pytest.approx(25.0)


def test_farming_calendar_spans_growing_season() -> None:
	calendar = farming_calendar("maize", 2024, HIGHVELD)

	assert calendar.activities["September"] == ["Land preparation", "Seed selection"]
	assert calendar.activities["October"] == ["Planting", "Basal fertilizer application"]
	assert calendar.activities["February"] == ["Harvest", "Post-harvest handling"]
	assert calendar.year == 2024


def test_long_term_prediction_without_history() -> None:
	prediction = build_long_term_prediction(HARARE, HIGHVELD, date(2024, 1, 1), 30, [], None)

	assert prediction.location == "Harare"
	assert prediction.date == date(2024, 1, 31)
	assert prediction.days_ahead == 30
	assert prediction.patterns_analyzed == 0
	assert prediction.crop_recommendation == "maize"
	assert prediction.soil_conditions.ph_level is None
	assert prediction.climate_indicators.temperature_trend is None
	assert 0.0 <= prediction.climate_indicators.climate_risk_index <= 1.0
	assert 0.0 <= prediction.yield_prediction <= 100.0


def test_long_term_prediction_uses_matching_season(observation_factory, loam_soil) -> None:
	history = observation_factory(datetime(2023, 12, 1, tzinfo=UTC), 91, temperature=20.0, temperature_step=0.05)
	patterns = analyze_patterns(history, HIGHVELD, HARARE)

	prediction = build_long_term_prediction(HARARE, HIGHVELD, date(2024, 12, 20), 20, patterns, loam_soil)

	assert prediction.patterns_analyzed == 1
	assert prediction.soil_conditions.ph_level == 6.5
	assert prediction.climate_indicators.temperature_trend == Trend.increasing
	assert prediction.climate_indicators.humidity_trend == Trend.stable
