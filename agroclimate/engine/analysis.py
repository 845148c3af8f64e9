"""Statistical weather analysis: summary statistics, anomalies, indices and hazards."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from agroclimate.engine.patterns import compute_trends
from agroclimate.models.enums import HazardLevel
from agroclimate.schemas.insights import (
	ClimateIndices,
	HazardAssessment,
	MetricStatistics,
	WeatherAnalysis,
	WeatherAnomaly,
)
from agroclimate.schemas.weather import WeatherObservation

TEMPERATURE_Z_THRESHOLD = 2.5
TEMPERATURE_Z_SEVERE = 3.0
PRECIPITATION_SIGMA = 2.0
EXPECTED_DAILY_PRECIPITATION = 2.0
OUTLOOK_WINDOW = 7

MITIGATION_ACTIONS: dict[str, tuple[str, ...]] = {
	"drought": (
		"Implement water harvesting systems",
		"Use drought-resistant crop varieties",
		"Practice conservation tillage",
		"Install efficient irrigation systems",
	),
	"flood": (
		"Improve drainage systems",
		"Plant flood-tolerant crops",
		"Elevate storage facilities",
		"Create flood barriers",
	),
	"heat_wave": (
		"Provide shade structures",
		"Increase irrigation frequency",
		"Use heat-tolerant varieties",
		"Implement mulching",
	),
	"frost": (
		"Use frost protection covers",
		"Plant frost-resistant varieties",
		"Irrigate before cold nights to hold soil heat",
	),
	"wind_damage": (
		"Plant windbreaks",
		"Use staking systems",
		"Choose wind-resistant varieties",
		"Implement shelter belts",
	),
}


def _statistics(values: np.ndarray) -> MetricStatistics:
	return MetricStatistics(
		mean=round(float(values.mean()), 3),
		median=round(float(np.median(values)), 3),
		minimum=round(float(values.min()), 3),
		maximum=round(float(values.max()), 3),
		std=round(float(values.std()), 3),
	)


def _band(value: float, high: float, moderate: float, *, below: bool = False) -> HazardLevel:
	if below:
		if value < high:
			return HazardLevel.high
		if value < moderate:
			return HazardLevel.medium
		return HazardLevel.low
	if value > high:
		return HazardLevel.high
	if value > moderate:
		return HazardLevel.medium
	return HazardLevel.low


def detect_weather_anomalies(observations: Sequence[WeatherObservation]) -> list[WeatherAnomaly]:
	temperatures = np.array([item.temperature for item in observations])
	precipitation = np.array([item.precipitation for item in observations])
	anomalies: list[WeatherAnomaly] = []

	temperature_std = float(temperatures.std())
	if temperature_std > 0:
		z_scores = (temperatures - temperatures.mean()) / temperature_std
		for item, z_score in zip(observations, z_scores, strict=True):
			if abs(z_score) <= TEMPERATURE_Z_THRESHOLD:
				continue
			anomalies.append(
				WeatherAnomaly(
					timestamp=item.timestamp,
					metric="temperature",
					value=item.temperature,
					z_score=round(float(z_score), 3),
					severity=HazardLevel.high if abs(z_score) > TEMPERATURE_Z_SEVERE else HazardLevel.medium,
					description="Unusually high temperature" if z_score > 0 else "Unusually low temperature",
				)
			)

	precipitation_std = float(precipitation.std())
	if precipitation_std > 0:
		limit = float(precipitation.mean()) + PRECIPITATION_SIGMA * precipitation_std
		for item in observations:
			if item.precipitation <= limit:
				continue
			anomalies.append(
				WeatherAnomaly(
					timestamp=item.timestamp,
					metric="precipitation",
					value=item.precipitation,
					severity=HazardLevel.high if item.precipitation > 50 else HazardLevel.medium,
					description="Extreme rainfall event",
				)
			)
	return sorted(anomalies, key=lambda anomaly: anomaly.timestamp)


def climate_indices(observations: Sequence[WeatherObservation]) -> ClimateIndices:
	temperatures = np.array([item.temperature for item in observations])
	humidity = np.array([item.humidity for item in observations])
	precipitation = np.array([item.precipitation for item in observations])

	drought_index = max(0.0, (EXPECTED_DAILY_PRECIPITATION - float(precipitation.mean())) / EXPECTED_DAILY_PRECIPITATION)
	heat_stress = float(np.maximum(0.0, (temperatures + humidity * 0.1 - 30.0) / 10.0).mean())
	# Comfort zone centred on 21.5°C and 55% humidity.
	temperature_comfort = np.clip(1.0 - np.abs(temperatures - 21.5) / 10.0, 0.0, 1.0)
	humidity_comfort = np.clip(1.0 - np.abs(humidity - 55.0) / 30.0, 0.0, 1.0)
	comfort = float(((temperature_comfort + humidity_comfort) / 2.0).mean()) * 100.0

	mean_temperature = float(temperatures.mean())
	if mean_temperature > 25:
		climate_type = "tropical" if float(humidity.mean()) > 70 else "arid"
	elif mean_temperature < 10:
		climate_type = "cold"
	else:
		climate_type = "temperate"

	return ClimateIndices(
		drought_index=round(min(1.0, drought_index), 3),
		heat_stress_index=round(heat_stress, 3),
		comfort_index=round(comfort, 2),
		climate_type=climate_type,
	)


def assess_hazards(observations: Sequence[WeatherObservation]) -> list[HazardAssessment]:
	temperatures = [item.temperature for item in observations]
	precipitation = [item.precipitation for item in observations]
	annualized_rain = sum(precipitation) / len(precipitation) * 365.0

	levels = {
		"drought": _band(annualized_rain, 400.0, 600.0, below=True),
		"flood": _band(max(precipitation), 50.0, 25.0),
		"heat_wave": _band(max(temperatures), 35.0, 30.0),
		"frost": _band(min(temperatures), 0.0, 5.0, below=True),
		"wind_damage": _band(max(item.wind_speed for item in observations), 20.0, 15.0),
	}
	return [
		HazardAssessment(
			hazard=hazard,
			level=level,
			mitigation=list(MITIGATION_ACTIONS[hazard]) if level != HazardLevel.low else [],
		)
		for hazard, level in levels.items()
	]


def project_outlook(observations: Sequence[WeatherObservation], trends: dict[str, float], days_ahead: int) -> dict[str, float]:
	recent = observations[-OUTLOOK_WINDOW:]
	temperature = sum(item.temperature for item in recent) / len(recent)
	humidity = sum(item.humidity for item in recent) / len(recent)
	daily_rain = sum(item.precipitation for item in recent) / len(recent)

	temperature_drift = float(np.clip(trends.get("temperature_trend", 0.0) * days_ahead, -5.0, 5.0))
	humidity_drift = float(np.clip(trends.get("humidity_trend", 0.0) * days_ahead, -15.0, 15.0))
	return {
		"temperature": round(temperature + temperature_drift, 2),
		"humidity": round(float(np.clip(humidity + humidity_drift, 0.0, 100.0)), 2),
		"precipitation_total": round(daily_rain * days_ahead, 2),
	}


def recommended_activities(indices: ClimateIndices, hazards: Sequence[HazardAssessment]) -> list[str]:
	elevated = {item.hazard for item in hazards if item.level in (HazardLevel.high, HazardLevel.critical)}
	activities: list[str] = []
	if "drought" in elevated or indices.drought_index > 0.5:
		activities.append("Schedule irrigation and conserve soil moisture")
	if "heat_wave" in elevated or indices.heat_stress_index > 0.5:
		activities.append("Shift field work and irrigation to cooler hours")
	if "flood" in elevated:
		activities.append("Clear drainage channels before the next heavy rains")
	if "frost" in elevated:
		activities.append("Cover seedlings and sensitive crops on cold nights")
	if "wind_damage" in elevated:
		activities.append("Stake tall crops and check windbreaks")
	if not activities:
		activities.append("Continue normal farming activities")
	return activities


def analyze_weather(location: str, observations: Sequence[WeatherObservation], days_ahead: int) -> WeatherAnalysis:
	"""Full statistical analysis; empty history yields an empty analysis, not an error."""
	if not observations:
		return WeatherAnalysis(location=location, days_ahead=days_ahead, data_points=0)

	ordered = sorted(observations, key=lambda item: item.timestamp)
	series = {
		"temperature": np.array([item.temperature for item in ordered]),
		"humidity": np.array([item.humidity for item in ordered]),
		"precipitation": np.array([item.precipitation for item in ordered]),
		"wind_speed": np.array([item.wind_speed for item in ordered]),
	}
	trends = compute_trends(ordered)
	indices = climate_indices(ordered)
	hazards = assess_hazards(ordered)

	return WeatherAnalysis(
		location=location,
		days_ahead=days_ahead,
		data_points=len(ordered),
		statistics={metric: _statistics(values) for metric, values in series.items()},
		rainy_days=int((series["precipitation"] > 0).sum()),
		dry_days=int((series["precipitation"] == 0).sum()),
		trends=trends,
		anomalies=detect_weather_anomalies(ordered),
		indices=indices,
		hazards=hazards,
		outlook=project_outlook(ordered, trends, days_ahead),
		recommended_activities=recommended_activities(indices, hazards),
	)
