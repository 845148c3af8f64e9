"""Seasonal and monthly pattern analysis over historical weather observations.

Observations are partitioned into southern-hemisphere seasons (December counts
toward the following year's summer), aggregated per season window and compared
against the zone climatology to flag anomalies. Calendar months with enough
data get the same treatment against that month's normals.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

import numpy as np

from agroclimate.engine.climatology import (
	DAYS_PER_MONTH,
	MONTH_NAMES,
	Location,
	ZoneProfile,
	monthly_normals,
	season_normals,
)
from agroclimate.models.enums import PatternType, Season
from agroclimate.schemas.patterns import MonthlyPattern, SeasonalPattern
from agroclimate.schemas.weather import WeatherObservation

# Anomaly thresholds, in baseline standard deviations.
ANOMALY_SIGMA = 2.0
TEMPERATURE_SIGMA = 1.5
PRECIPITATION_SIGMA_RATIO = 0.4
PRECIPITATION_SIGMA_FLOOR = 0.5
HUMIDITY_SIGMA = 8.0

EXTREME_DAY_DELTA = 10.0
MIN_TREND_POINTS = 3
MIN_MONTH_POINTS = 5

_SEASON_ORDER = {Season.summer: 0, Season.autumn: 1, Season.winter: 2, Season.spring: 3}


def season_window(observation: WeatherObservation) -> tuple[int, Season]:
	month = observation.timestamp.month
	season = Season.for_month(month)
	year = observation.timestamp.year + 1 if month == 12 else observation.timestamp.year
	return year, season


def classify_pattern(average_temperature: float, total_precipitation: float) -> PatternType:
	if average_temperature > 25.0 and total_precipitation > 100.0:
		return PatternType.hot_wet
	if average_temperature > 25.0 and total_precipitation < 50.0:
		return PatternType.hot_dry
	if average_temperature < 15.0 and total_precipitation > 100.0:
		return PatternType.cool_wet
	if average_temperature < 15.0 and total_precipitation < 50.0:
		return PatternType.cool_dry
	return PatternType.moderate


def linear_trend(days: np.ndarray, values: np.ndarray) -> float:
	"""Least-squares slope in units per day."""
	if values.size < MIN_TREND_POINTS or np.ptp(days) == 0:
		return 0.0
	slope, _intercept = np.polyfit(days, values, 1)
	return float(slope)


def compute_trends(observations: Sequence[WeatherObservation]) -> dict[str, float]:
	if len(observations) < MIN_TREND_POINTS:
		return {}

	origin = observations[0].timestamp
	days = np.array([(item.timestamp - origin).total_seconds() / 86400.0 for item in observations])
	series = {
		"temperature": np.array([item.temperature for item in observations]),
		"humidity": np.array([item.humidity for item in observations]),
		"precipitation": np.array([item.precipitation for item in observations]),
	}

	trends: dict[str, float] = {}
	for metric, values in series.items():
		trends[f"{metric}_trend"] = round(linear_trend(days, values), 4)
		trends[f"{metric}_volatility"] = round(float(np.std(values)), 4)
	return trends


def _flag_anomalies(
	observations: Sequence[WeatherObservation],
	baseline: tuple[float, float, float],
) -> list[str]:
	temperatures = np.array([item.temperature for item in observations])
	humidity = np.array([item.humidity for item in observations])
	day_count = len({item.timestamp.date() for item in observations})
	daily_precipitation = sum(item.precipitation for item in observations) / max(day_count, 1)

	base_temperature, base_precipitation, base_humidity = baseline
	precipitation_sigma = max(base_precipitation * PRECIPITATION_SIGMA_RATIO, PRECIPITATION_SIGMA_FLOOR)

	flags: set[str] = set()
	checks = (
		("temperature", float(temperatures.mean()), base_temperature, TEMPERATURE_SIGMA),
		("precipitation", daily_precipitation, base_precipitation, precipitation_sigma),
		("humidity", float(humidity.mean()), base_humidity, HUMIDITY_SIGMA),
	)
	for metric, observed, expected, sigma in checks:
		deviation = (observed - expected) / sigma
		if deviation > ANOMALY_SIGMA:
			flags.add(f"{metric}_above_normal")
		elif deviation < -ANOMALY_SIGMA:
			flags.add(f"{metric}_below_normal")

	window_mean = float(temperatures.mean())
	if float(temperatures.max()) > window_mean + EXTREME_DAY_DELTA:
		flags.add("extreme_high_temperature")
	if float(temperatures.min()) < window_mean - EXTREME_DAY_DELTA:
		flags.add("extreme_low_temperature")
	return sorted(flags)


def detect_anomalies(
	observations: Sequence[WeatherObservation],
	season: Season,
	zone: ZoneProfile,
	location: Location | None = None,
) -> list[str]:
	return _flag_anomalies(observations, season_normals(zone, season, location))


def detect_monthly_anomalies(
	observations: Sequence[WeatherObservation],
	month: int,
	zone: ZoneProfile,
	location: Location | None = None,
) -> list[str]:
	temperature, rainfall, humidity, _wind = monthly_normals(zone, month, location)
	return _flag_anomalies(observations, (temperature, rainfall / DAYS_PER_MONTH, humidity))


def summarize(observations: Sequence[WeatherObservation], label: str) -> str:
	if not observations:
		return f"No data available for {label}"
	temperatures = [item.temperature for item in observations]
	average = sum(temperatures) / len(temperatures)
	total_precipitation = sum(item.precipitation for item in observations)
	average_humidity = sum(item.humidity for item in observations) / len(observations)
	return (
		f"{label}: Avg {average:.1f}°C ({min(temperatures):.1f}-{max(temperatures):.1f}°C), "
		f"Precip {total_precipitation:.1f}mm, "
		f"Humidity {average_humidity:.1f}%"
	)


def analyze_patterns(
	observations: Sequence[WeatherObservation],
	zone: ZoneProfile,
	location: Location | None = None,
) -> list[SeasonalPattern]:
	"""Aggregate observations into chronologically ordered seasonal patterns.

	An empty input yields an empty list; callers treat that as "no data".
	"""
	if not observations:
		return []

	windows: dict[tuple[int, Season], list[WeatherObservation]] = defaultdict(list)
	for item in sorted(observations, key=lambda obs: obs.timestamp):
		windows[season_window(item)].append(item)

	patterns: list[SeasonalPattern] = []
	for year, season in sorted(windows, key=lambda key: (key[0], _SEASON_ORDER[key[1]])):
		rows = windows[(year, season)]
		average_temperature = round(float(np.mean([item.temperature for item in rows])), 2)
		total_precipitation = round(float(np.sum([item.precipitation for item in rows])), 2)
		average_humidity = round(float(np.mean([item.humidity for item in rows])), 2)

		patterns.append(
			SeasonalPattern(
				season=season,
				season_year=year,
				start=rows[0].timestamp,
				end=rows[-1].timestamp,
				observation_count=len(rows),
				average_temperature=average_temperature,
				total_precipitation=total_precipitation,
				average_humidity=average_humidity,
				pattern_type=classify_pattern(average_temperature, total_precipitation),
				anomalies=detect_anomalies(rows, season, zone, location),
				trends=compute_trends(rows),
				summary=summarize(rows, f"{season.value.title()} {year}"),
			)
		)
	return patterns


def analyze_monthly_patterns(
	observations: Sequence[WeatherObservation],
	zone: ZoneProfile,
	location: Location | None = None,
) -> list[MonthlyPattern]:
	"""Per calendar-month windows, skipping months with fewer than ``MIN_MONTH_POINTS`` observations."""
	windows: dict[tuple[int, int], list[WeatherObservation]] = defaultdict(list)
	for item in sorted(observations, key=lambda obs: obs.timestamp):
		windows[(item.timestamp.year, item.timestamp.month)].append(item)

	patterns: list[MonthlyPattern] = []
	for year, month in sorted(windows):
		rows = windows[(year, month)]
		if len(rows) < MIN_MONTH_POINTS:
			continue
		average_temperature = round(float(np.mean([item.temperature for item in rows])), 2)
		total_precipitation = round(float(np.sum([item.precipitation for item in rows])), 2)
		average_humidity = round(float(np.mean([item.humidity for item in rows])), 2)
		month_name = MONTH_NAMES[month - 1]

		patterns.append(
			MonthlyPattern(
				month=month,
				month_name=month_name,
				year=year,
				start=rows[0].timestamp,
				end=rows[-1].timestamp,
				observation_count=len(rows),
				average_temperature=average_temperature,
				total_precipitation=total_precipitation,
				average_humidity=average_humidity,
				pattern_type=classify_pattern(average_temperature, total_precipitation),
				anomalies=detect_monthly_anomalies(rows, month, zone, location),
				trends=compute_trends(rows),
				summary=summarize(rows, f"{month_name} {year}"),
			)
		)
	return patterns
