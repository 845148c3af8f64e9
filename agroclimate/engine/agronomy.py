"""Agronomic rules for long-term predictions, pest and disease risk, and crop calendars."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

import numpy as np

from agroclimate.engine.climatology import MONTH_NAMES, Location, ZoneProfile, monthly_normals
from agroclimate.models.enums import GrowthStage, HazardLevel, Season, Trend
from agroclimate.schemas.insights import FarmingCalendar, PestDiseaseAssessment, RiskIndicator
from agroclimate.schemas.patterns import SeasonalPattern
from agroclimate.schemas.prediction import AgroClimaticPrediction, ClimateIndicators, SoilConditions
from agroclimate.schemas.weather import SoilData, WeatherObservation


@dataclass(frozen=True, slots=True)
class CropRequirements:
	temperature_min: float
	temperature_max: float
	humidity_min: float
	humidity_max: float
	water_requirement_mm: float
	growing_period_days: int
	planting_month: int

	@property
	def daily_water_need(self) -> float:
		return self.water_requirement_mm / self.growing_period_days


CROP_REQUIREMENTS: dict[str, CropRequirements] = {
	"maize": CropRequirements(18.0, 24.0, 60.0, 80.0, 500.0, 120, 10),
	"wheat": CropRequirements(15.0, 20.0, 50.0, 70.0, 400.0, 150, 5),
	"sorghum": CropRequirements(20.0, 30.0, 40.0, 60.0, 300.0, 100, 11),
	"cotton": CropRequirements(21.0, 30.0, 50.0, 70.0, 600.0, 180, 11),
	"tobacco": CropRequirements(20.0, 28.0, 60.0, 80.0, 400.0, 120, 9),
}

# Slopes per day beyond which a seasonal trend counts as a change.
TREND_THRESHOLDS = {
	"temperature": 0.02,
	"precipitation": 0.02,
	"humidity": 0.05,
}

_PEST_PREVENTION: dict[str, tuple[str, ...]] = {
	"maize": ("Fall armyworm: early detection and Bt varieties", "Stem borer: crop rotation and resistant varieties"),
	"wheat": ("Aphids: encourage natural predators", "Rust: plant resistant varieties"),
	"sorghum": ("Bird damage: early harvest and scaring", "Stem borer: destroy crop residues"),
	"cotton": ("Bollworm: scout weekly and spray at threshold", "Aphids and jassids: avoid excess nitrogen"),
	"tobacco": ("Aphids: remove suckers promptly", "Blue mould: keep seedbeds well ventilated"),
}

_GENERIC_PREVENTION = ("Regular field monitoring", "Good field hygiene")


@dataclass(frozen=True, slots=True)
class ProjectedConditions:
	temperature: float
	humidity: float
	precipitation: float


# ── Derived soil indices ────────────────────────────────────────────────────


def soil_moisture_index(precipitation: float, humidity: float) -> float:
	return float(np.clip(precipitation * 2.0 + humidity * 0.3, 0.0, 100.0))


def evapotranspiration(temperature: float, humidity: float) -> float:
	return float(np.clip(temperature * 0.5 - humidity * 0.2, 0.0, 10.0))


def soil_conditions(moisture: float, temperature: float, soil: SoilData | None) -> SoilConditions:
	return SoilConditions(
		moisture_level=round(moisture, 2),
		temperature=round(temperature, 2),
		ph_level=soil.ph if soil is not None else None,
		nutrient_status="good" if moisture > 50 else "poor",
		drainage="poor" if moisture > 80 else "good",
	)


# ── Crop scoring & advice ───────────────────────────────────────────────────


def best_crop(temperature: float, humidity: float, precipitation: float) -> str:
	"""Highest scoring crop for the projected conditions; ties keep table order."""
	scores: dict[str, float] = {}
	for crop, needs in CROP_REQUIREMENTS.items():
		score = 3.0 if needs.temperature_min <= temperature <= needs.temperature_max else 1.0
		score += 2.0 if needs.humidity_min <= humidity <= needs.humidity_max else 0.5
		score += 2.0 if precipitation >= needs.daily_water_need else 0.5
		scores[crop] = score
	return max(scores, key=lambda name: scores[name])


def yield_prediction(crop: str, temperature: float, humidity: float, precipitation: float) -> float:
	needs = CROP_REQUIREMENTS[crop]
	value = 70.0
	value += 20.0 if needs.temperature_min <= temperature <= needs.temperature_max else -15.0
	value += 10.0 if needs.humidity_min <= humidity <= needs.humidity_max else -10.0
	value += 15.0 if precipitation >= needs.daily_water_need * 0.8 else -20.0
	return max(0.0, min(100.0, value))


def weather_alerts(temperature: float, humidity: float, precipitation: float) -> list[str]:
	alerts: list[str] = []
	if temperature > 35:
		alerts.append("High temperature warning")
	if temperature < 5:
		alerts.append("Frost warning")
	if humidity > 85:
		alerts.append("High humidity - disease risk")
	if precipitation > 20:
		alerts.append("Heavy rainfall expected")
	if precipitation < 1 and temperature > 25:
		alerts.append("Drought conditions")
	return alerts


def is_critical_alert(alert: str) -> bool:
	lowered = alert.lower()
	return any(token in lowered for token in ("warning", "drought", "frost"))


def irrigation_advice(soil_moisture: float, precipitation: float) -> str:
	if soil_moisture < 30:
		return "Immediate irrigation required - soil moisture critically low"
	if soil_moisture < 50:
		return "Irrigation recommended within 24 hours"
	if precipitation > 5:
		return "No irrigation needed - sufficient rainfall expected"
	return "Monitor soil moisture - irrigation may be needed soon"


def planting_advice(crop: str, temperature: float, precipitation: float) -> str:
	needs = CROP_REQUIREMENTS[crop]
	if needs.temperature_min <= temperature <= needs.temperature_max and precipitation > 2:
		return f"Optimal conditions for planting {crop}"
	if temperature < needs.temperature_min:
		return f"Wait for warmer temperatures before planting {crop}"
	if precipitation < 1:
		return f"Ensure adequate irrigation before planting {crop}"
	return f"Conditions are suitable for planting {crop} with proper preparation"


def harvesting_advice(temperature: float, precipitation: float) -> str:
	if precipitation > 10:
		return "Delay harvesting due to expected heavy rainfall"
	if temperature > 30:
		return "Harvest early morning to avoid heat stress"
	return "Good conditions for harvesting"


# ── Pest & disease ──────────────────────────────────────────────────────────


def pest_level(temperature: float, humidity: float) -> HazardLevel:
	if temperature > 28 and humidity > 75:
		return HazardLevel.high
	if temperature > 25 and humidity > 65:
		return HazardLevel.medium
	return HazardLevel.low


def disease_level(humidity: float, precipitation: float) -> HazardLevel:
	if humidity > 90 and precipitation > 20:
		return HazardLevel.critical
	if humidity > 80 and precipitation > 5:
		return HazardLevel.high
	if humidity > 70 and precipitation > 3:
		return HazardLevel.medium
	return HazardLevel.low


def assess_pest_disease(crop: str, growth_stage: GrowthStage, weather: WeatherObservation) -> PestDiseaseAssessment:
	pests = pest_level(weather.temperature, weather.humidity)
	# Pest pressure during flowering and grain fill hits yield directly.
	if pests == HazardLevel.high and growth_stage in (GrowthStage.flowering, GrowthStage.fruiting):
		pests = HazardLevel.critical
	diseases = disease_level(weather.humidity, weather.precipitation)

	factors: list[str] = []
	if weather.temperature > 25:
		factors.append(f"Warm temperatures ({weather.temperature:.1f}°C) favour pest breeding")
	if weather.humidity > 70:
		factors.append(f"High humidity ({weather.humidity:.0f}%) favours fungal growth")
	if weather.precipitation > 3:
		factors.append(f"Wet conditions ({weather.precipitation:.1f}mm) spread leaf diseases")

	worst = max(pests, diseases, key=lambda level: level.severity)
	if worst in (HazardLevel.high, HazardLevel.critical):
		schedule = "Twice-weekly field inspections"
	elif worst == HazardLevel.medium:
		schedule = "Weekly field inspections"
	else:
		schedule = "Regular field inspections"

	return PestDiseaseAssessment(
		pest_risk=RiskIndicator.of(pests),
		disease_risk=RiskIndicator.of(diseases),
		contributing_factors=factors,
		prevention=list(_PEST_PREVENTION.get(crop.strip().lower(), _GENERIC_PREVENTION)),
		monitoring_schedule=schedule,
	)


# ── Calendar ────────────────────────────────────────────────────────────────


def farming_calendar(crop: str, year: int, zone: ZoneProfile) -> FarmingCalendar:
	"""Month-by-month activities from land preparation to harvest."""
	needs = CROP_REQUIREMENTS.get(crop.strip().lower())
	planting_month = needs.planting_month if needs is not None else zone.planting_window[0]
	season_months = math.ceil((needs.growing_period_days if needs is not None else 120) / 30)

	def name_for(offset: int) -> str:
		return MONTH_NAMES[(planting_month - 1 + offset) % 12]

	activities: dict[str, list[str]] = {
		name_for(-1): ["Land preparation", "Seed selection"],
		name_for(0): ["Planting", "Basal fertilizer application"],
		name_for(1): ["Early growth monitoring", "Weed control"],
		name_for(2): ["Top dressing", "Pest scouting"],
	}
	for offset in range(3, season_months):
		activities[name_for(offset)] = ["Growth monitoring", "Pest and disease control"]
	activities[name_for(season_months)] = ["Harvest", "Post-harvest handling"]

	return FarmingCalendar(
		crop=crop,
		year=year,
		activities=activities,
		key_activities=["Planting", "Fertilization", "Pest control", "Harvest"],
		weather_considerations="Monitor rainfall patterns and adjust schedule",
	)


# ── Long-term composite ─────────────────────────────────────────────────────


def _matching_pattern(patterns: Sequence[SeasonalPattern], season: Season) -> SeasonalPattern | None:
	matches = [item for item in patterns if item.season == season]
	return matches[-1] if matches else None


def project_conditions(
	target: date,
	days_ahead: int,
	zone: ZoneProfile,
	location: Location,
	pattern: SeasonalPattern | None,
) -> ProjectedConditions:
	"""Blend target-month climatology with the most recent matching historical season."""
	normal_temperature, normal_rainfall, normal_humidity, _wind = monthly_normals(zone, target.month, location)
	temperature = normal_temperature
	humidity = normal_humidity
	precipitation = normal_rainfall / 30.4

	if pattern is not None:
		horizon = min(days_ahead, 90)
		drift = float(np.clip(pattern.trends.get("temperature_trend", 0.0) * horizon, -3.0, 3.0))
		temperature = 0.5 * normal_temperature + 0.5 * pattern.average_temperature + drift
		humidity = 0.5 * normal_humidity + 0.5 * pattern.average_humidity
		precipitation = 0.5 * precipitation + 0.5 * pattern.total_precipitation / pattern.observation_count

	return ProjectedConditions(
		temperature=float(np.clip(temperature, 5.0, 45.0)),
		humidity=float(np.clip(humidity, 10.0, 100.0)),
		precipitation=float(np.clip(precipitation, 0.0, 50.0)),
	)


def _trend_label(pattern: SeasonalPattern | None, metric: str) -> Trend | None:
	if pattern is None:
		return None
	slope = pattern.trends.get(f"{metric}_trend")
	if slope is None:
		return None
	threshold = TREND_THRESHOLDS[metric]
	if slope > threshold:
		return Trend.increasing
	if slope < -threshold:
		return Trend.decreasing
	return Trend.stable


def climate_indicators(
	conditions: ProjectedConditions,
	crop: str,
	normal_temperature: float,
	pattern: SeasonalPattern | None,
) -> ClimateIndicators:
	needs = CROP_REQUIREMENTS[crop]
	dryness = float(np.clip(1.0 - conditions.precipitation / needs.daily_water_need, 0.0, 1.0))
	heat = float(np.clip((conditions.temperature - 30.0) / 10.0, 0.0, 1.0))
	anomaly_load = min(1.0, len(pattern.anomalies) / 3.0) if pattern is not None else 0.0
	return ClimateIndicators(
		temperature_trend=_trend_label(pattern, "temperature"),
		precipitation_trend=_trend_label(pattern, "precipitation"),
		humidity_trend=_trend_label(pattern, "humidity"),
		seasonal_deviation=round(conditions.temperature - normal_temperature, 2),
		climate_risk_index=round(0.4 * dryness + 0.3 * heat + 0.3 * anomaly_load, 3),
	)


def build_long_term_prediction(
	location: Location,
	zone: ZoneProfile,
	start_date: date,
	days_ahead: int,
	patterns: Sequence[SeasonalPattern],
	soil: SoilData | None,
) -> AgroClimaticPrediction:
	target = start_date + timedelta(days=days_ahead)
	pattern = _matching_pattern(patterns, Season.for_month(target.month))
	conditions = project_conditions(target, days_ahead, zone, location, pattern)
	normal_temperature = monthly_normals(zone, target.month, location)[0]

	crop = best_crop(conditions.temperature, conditions.humidity, conditions.precipitation)
	moisture = soil_moisture_index(conditions.precipitation, conditions.humidity)
	pests = pest_level(conditions.temperature, conditions.humidity)
	diseases = disease_level(conditions.humidity, conditions.precipitation)

	return AgroClimaticPrediction(
		location=location.name,
		date=target,
		days_ahead=days_ahead,
		temperature=round(conditions.temperature, 2),
		humidity=round(conditions.humidity, 2),
		precipitation=round(conditions.precipitation, 2),
		soil_moisture=round(moisture, 2),
		evapotranspiration=round(evapotranspiration(conditions.temperature, conditions.humidity), 2),
		crop_recommendation=crop,
		yield_prediction=yield_prediction(crop, conditions.temperature, conditions.humidity, conditions.precipitation),
		irrigation_advice=irrigation_advice(moisture, conditions.precipitation),
		planting_advice=planting_advice(crop, conditions.temperature, conditions.precipitation),
		harvesting_advice=harvesting_advice(conditions.temperature, conditions.precipitation),
		pest_risk=RiskIndicator.of(pests),
		disease_risk=RiskIndicator.of(diseases),
		weather_alerts=weather_alerts(conditions.temperature, conditions.humidity, conditions.precipitation),
		soil_conditions=soil_conditions(moisture, conditions.temperature, soil),
		climate_indicators=climate_indicators(conditions, crop, normal_temperature, pattern),
		patterns_analyzed=len(patterns),
	)
