"""Seasonal forecast generator (RBSWSA: rule-based seasonal weather scenario analysis).

Each target month starts from the zone climatology, is shifted by the ENSO
phase, perturbed with jitter seeded from (location, zone, ENSO, target month)
and then blended with the previous calendar month. Every quantity depends only
on the target month and its horizon index, so a 6-month run is a prefix of the
12-month run for the same reference date.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import numpy as np

from agroclimate.engine.climatology import (
	DAYS_PER_MONTH,
	ENSO_EFFECTS,
	MONTH_NAMES,
	MONTHLY_RULES,
	Location,
	ZoneProfile,
	monthly_normals,
	resolve_enso,
	resolve_location,
	resolve_zone,
)
from agroclimate.engine.drought import compute_drought_risk
from agroclimate.errors import InvalidParameterError
from agroclimate.models.enums import ClimateZone, EnsoStatus, RiskLevel, SeasonalType, Trend
from agroclimate.schemas.forecast import (
	Climatology,
	DroughtRiskAssessment,
	MonthlyPrediction,
	PredictionBundle,
	RainfallOutlook,
	SeasonalSummary,
	TemperatureOutlook,
)
from agroclimate.schemas.weather import WeatherObservation

ALGORITHM = "RBSWSA"
MIN_MONTHS = 1
MAX_MONTHS = 24

SMOOTHING_WEIGHT = 0.25
ANOMALY_DECAY_MONTHS = 3
CONFIDENCE_FLOOR = 0.3
MAX_RECOMMENDATIONS = 12


@dataclass(frozen=True, slots=True)
class _MonthState:
	temperature: float
	rainfall: float
	humidity: float
	wind: float


@dataclass(frozen=True, slots=True)
class RecentAnomaly:
	"""Observed departure from climatology over the last few weeks."""

	temperature: float
	rainfall_ratio: float


def _month_seed(location: Location, zone: ZoneProfile, enso: EnsoStatus, year: int, month: int) -> int:
	key = f"{location.name.lower()}|{zone.zone.value}|{enso.value}|{year:04d}-{month:02d}"
	return int.from_bytes(hashlib.sha256(key.encode("utf-8")).digest()[:8], "big")


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
	index = year * 12 + (month - 1) + offset
	return index // 12, index % 12 + 1


def _raw_month(location: Location, zone: ZoneProfile, enso: EnsoStatus, year: int, month: int) -> _MonthState:
	temperature, rainfall, humidity, wind = monthly_normals(zone, month, location)
	effect = ENSO_EFFECTS[enso]
	rng = np.random.default_rng(_month_seed(location, zone, enso, year, month))
	temp_jitter, rain_scale, humidity_jitter, wind_jitter = (
		rng.uniform(-1.0, 1.0),
		rng.uniform(0.9, 1.1),
		rng.uniform(-5.0, 5.0),
		rng.uniform(-1.5, 1.5),
	)
	return _MonthState(
		temperature=temperature + effect.temperature * 3.0 + float(temp_jitter),
		rainfall=rainfall * (1.0 + effect.rainfall) * float(rain_scale),
		humidity=float(np.clip(humidity + float(humidity_jitter), 10.0, 100.0)),
		wind=max(0.0, wind + float(wind_jitter)),
	)


def _blend(current: _MonthState, previous: _MonthState) -> _MonthState:
	keep = 1.0 - SMOOTHING_WEIGHT
	return _MonthState(
		temperature=keep * current.temperature + SMOOTHING_WEIGHT * previous.temperature,
		rainfall=keep * current.rainfall + SMOOTHING_WEIGHT * previous.rainfall,
		humidity=keep * current.humidity + SMOOTHING_WEIGHT * previous.humidity,
		wind=keep * current.wind + SMOOTHING_WEIGHT * previous.wind,
	)


def recent_anomaly(
	observations: Sequence[WeatherObservation],
	zone: ZoneProfile,
	location: Location,
) -> RecentAnomaly | None:
	"""Mean temperature offset and rainfall ratio of observations versus their monthly normals."""
	if not observations:
		return None
	temperature_offsets = []
	observed_rain = 0.0
	expected_rain = 0.0
	for item in observations:
		month = item.timestamp.month
		normal_temperature, normal_rainfall, _humidity, _wind = monthly_normals(zone, month, location)
		temperature_offsets.append(item.temperature - normal_temperature)
		observed_rain += item.precipitation
		expected_rain += normal_rainfall / DAYS_PER_MONTH

	ratio = observed_rain / expected_rain - 1.0 if expected_rain > 0 else 0.0
	return RecentAnomaly(
		temperature=float(np.clip(np.mean(temperature_offsets), -3.0, 3.0)),
		rainfall_ratio=float(np.clip(ratio, -0.5, 0.5)),
	)


def confidence_for(horizon: int, enso: EnsoStatus) -> float:
	"""Non-increasing in ``horizon``; stronger ENSO signals lower the ceiling."""
	effect = ENSO_EFFECTS[enso]
	horizon_term = 0.9 - 0.05 * horizon
	enso_term = 1.0 - (abs(effect.temperature) + abs(effect.rainfall)) * 0.2
	return round(max(CONFIDENCE_FLOOR, (horizon_term + enso_term) / 2.0), 3)


def describe_conditions(temperature: float, rainfall: float, humidity: float, wind: float) -> list[str]:
	conditions: list[str] = []
	if temperature > 30:
		conditions.append("Hot")
	elif temperature < 15:
		conditions.append("Cool")
	else:
		conditions.append("Moderate")

	if rainfall > 100:
		conditions.append("Wet")
	elif rainfall < 20:
		conditions.append("Dry")
	else:
		conditions.append("Normal")

	if humidity > 80:
		conditions.append("Humid")
	elif humidity < 40:
		conditions.append("Arid")

	if wind > 20:
		conditions.append("Windy")
	return conditions


def forecast_months(
	location: Location,
	zone: ZoneProfile,
	enso: EnsoStatus,
	prediction_months: int,
	reference_date: date,
	anomaly: RecentAnomaly | None = None,
) -> list[MonthlyPrediction]:
	predictions: list[MonthlyPrediction] = []
	for horizon in range(prediction_months):
		year, month = _shift_month(reference_date.year, reference_date.month, horizon)
		prev_year, prev_month = _shift_month(year, month, -1)
		state = _blend(
			_raw_month(location, zone, enso, year, month),
			_raw_month(location, zone, enso, prev_year, prev_month),
		)

		temperature = state.temperature
		rainfall = state.rainfall
		if anomaly is not None:
			weight = max(0.0, 1.0 - horizon / ANOMALY_DECAY_MONTHS)
			temperature += weight * anomaly.temperature
			rainfall *= 1.0 + weight * anomaly.rainfall_ratio

		normal_temperature, normal_rainfall, _humidity, _wind = monthly_normals(zone, month, location)
		rainfall = max(0.0, rainfall)
		predictions.append(
			MonthlyPrediction(
				month=month,
				month_name=MONTH_NAMES[month - 1],
				year=year,
				horizon=horizon,
				temperature=TemperatureOutlook(
					average=round(temperature, 2),
					min=round(temperature - 5.0, 2),
					max=round(temperature + 5.0, 2),
				),
				rainfall=RainfallOutlook(
					total=round(rainfall, 2),
					variability=round(rainfall * (0.25 + 0.02 * horizon), 2),
					rainy_days=min(31, round(rainfall / 10.0)),
				),
				humidity=round(state.humidity, 2),
				wind_speed=round(state.wind, 2),
				conditions=describe_conditions(temperature, rainfall, state.humidity, state.wind),
				description=MONTHLY_RULES[month].description,
				confidence=confidence_for(horizon, enso),
				climatology=Climatology(
					temperature=round(normal_temperature, 2),
					rainfall=round(normal_rainfall, 2),
				),
			)
		)
	return predictions


def summarize_season(monthly: Sequence[MonthlyPrediction], enso: EnsoStatus) -> SeasonalSummary:
	temperatures = [item.temperature.average for item in monthly]
	rainfall = [item.rainfall.total for item in monthly]
	average_temperature = sum(temperatures) / len(temperatures)
	total_rainfall = sum(rainfall)
	average_humidity = sum(item.humidity for item in monthly) / len(monthly)

	temperature_trend = Trend.stable
	rainfall_trend = Trend.stable
	if len(monthly) >= 2:
		if temperatures[-1] > temperatures[0] + 2:
			temperature_trend = Trend.increasing
		elif temperatures[-1] < temperatures[0] - 2:
			temperature_trend = Trend.decreasing
		if rainfall[-1] > rainfall[0] * 1.5:
			rainfall_trend = Trend.increasing
		elif rainfall[-1] < rainfall[0] * 0.5:
			rainfall_trend = Trend.decreasing

	# Classified on a three-month equivalent so long horizons are not always "wet".
	seasonal_rainfall = total_rainfall / len(monthly) * 3.0
	if seasonal_rainfall > 300:
		seasonal_type = SeasonalType.wet
	elif seasonal_rainfall < 100:
		seasonal_type = SeasonalType.dry
	else:
		seasonal_type = SeasonalType.transition

	if average_temperature > 25:
		temperature_label = "warm"
	elif average_temperature < 20:
		temperature_label = "cool"
	else:
		temperature_label = "moderate"
	rainfall_label = {
		SeasonalType.wet: "wet",
		SeasonalType.dry: "dry",
		SeasonalType.transition: "normal",
	}[seasonal_type]

	return SeasonalSummary(
		average_temperature=round(average_temperature, 2),
		total_rainfall=round(total_rainfall, 2),
		average_humidity=round(average_humidity, 2),
		temperature_trend=temperature_trend,
		rainfall_trend=rainfall_trend,
		seasonal_type=seasonal_type,
		description=(
			f"Expecting {temperature_label} temperatures with {rainfall_label} rainfall conditions. "
			f"{ENSO_EFFECTS[enso].description}"
		),
	)


def farming_recommendations(
	monthly: Sequence[MonthlyPrediction],
	zone: ZoneProfile,
	drought: DroughtRiskAssessment,
	reference_month: int,
) -> list[str]:
	recommendations = [f"Recommended crops for your zone: {', '.join(zone.suitable_crops[:3])}"]

	next_month = reference_month % 12 + 1
	if reference_month in zone.planting_window:
		recommendations.append("OPTIMAL PLANTING WINDOW: Start planting now for best yields")
	elif next_month in zone.planting_window:
		recommendations.append("Prepare fields now - planting window opens next month")

	if any(item.month in zone.frost_months for item in monthly[:3]):
		recommendations.append("FROST RISK: Protect sensitive crops, delay planting frost-sensitive varieties")

	if drought.risk_level == RiskLevel.high:
		recommendations.extend(
			[
				"HIGH DROUGHT RISK: Plant drought-tolerant crops (sorghum, millet, sunflower)",
				"Implement water conservation - mulching is critical",
				"Consider drip irrigation or water harvesting",
				"Reduce planting density to conserve moisture",
			]
		)
	elif drought.risk_level == RiskLevel.medium:
		recommendations.extend(
			[
				"Moderate drought risk: Prepare water conservation measures",
				"Mix drought-resistant and normal crop varieties",
			]
		)

	average_temperature = sum(item.temperature.average for item in monthly) / len(monthly)
	if average_temperature > 28:
		recommendations.extend(
			[
				"HIGH TEMPERATURES: Water early morning (before 8am) or evening (after 5pm)",
				"Apply mulch (10-15cm deep) to cool soil and retain moisture",
				"Monitor crops for heat stress - wilting, leaf curling",
			]
		)
	elif average_temperature < 18 and zone.frost_months:
		recommendations.append("Cool temperatures: Plant cool-season crops (wheat, barley, potatoes)")

	seasonal_rainfall = sum(item.rainfall.total for item in monthly) / len(monthly) * 3.0
	if seasonal_rainfall > 400:
		recommendations.extend(
			[
				"HIGH RAINFALL EXPECTED: Ensure proper field drainage",
				"Use raised beds or ridges for planting",
				"Monitor for waterlogging and soil erosion",
				"Delay fertilizer application until after heavy rains",
			]
		)
	elif seasonal_rainfall < 200:
		recommendations.append("Low rainfall: Irrigate regularly, target 25-30mm per week for most crops")

	soil_type = zone.soil_type.lower()
	if "sand" in soil_type:
		recommendations.append("Sandy soils: Increase organic matter, fertilize more frequently in smaller doses")
	elif "loam" in soil_type:
		recommendations.append("Loamy soils: Ideal for most crops, maintain organic matter levels")

	return recommendations[:MAX_RECOMMENDATIONS]


def validate_forecast_request(
	climate_zone: ClimateZone | str,
	prediction_months: int,
	enso_status: EnsoStatus | str,
) -> tuple[ZoneProfile, EnsoStatus]:
	"""Check the horizon and resolve zone and ENSO phase, raising InvalidParameterError on bad input."""
	if isinstance(prediction_months, bool) or not isinstance(prediction_months, int):
		raise InvalidParameterError("prediction_months must be an integer")
	if not MIN_MONTHS <= prediction_months <= MAX_MONTHS:
		raise InvalidParameterError(f"prediction_months must be within {MIN_MONTHS}..{MAX_MONTHS}, got {prediction_months}")
	return resolve_zone(climate_zone), resolve_enso(enso_status)


def generate_seasonal_prediction(
	location: Location | str,
	climate_zone: ClimateZone | str,
	prediction_months: int,
	enso_status: EnsoStatus | str,
	*,
	reference_date: date,
	recent_observations: Sequence[WeatherObservation] | None = None,
) -> PredictionBundle:
	"""Build the full seasonal bundle. Pure and deterministic for fixed inputs."""
	zone, enso = validate_forecast_request(climate_zone, prediction_months, enso_status)
	resolved_location = resolve_location(location) if isinstance(location, str) else location

	anomaly = recent_anomaly(recent_observations or [], zone, resolved_location)
	monthly = forecast_months(resolved_location, zone, enso, prediction_months, reference_date, anomaly)
	drought = compute_drought_risk(monthly)

	return PredictionBundle(
		algorithm=ALGORITHM,
		location=resolved_location.name,
		climate_zone=zone.zone,
		enso_status=enso,
		prediction_months=prediction_months,
		reference_date=reference_date,
		seasonal_summary=summarize_season(monthly, enso),
		monthly_predictions=monthly,
		drought_risk=drought,
		farming_recommendations=farming_recommendations(monthly, zone, drought, reference_date.month),
	)
