"""Crop, irrigation and weather insights for a location."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from redis.asyncio import Redis

from agroclimate.engine.agronomy import assess_pest_disease, farming_calendar
from agroclimate.engine.analysis import analyze_weather
from agroclimate.engine.climatology import resolve_location, resolve_zone
from agroclimate.engine.suitability import (
	CROP_CATALOG,
	calculate_suitability,
	create_crop_recommendation,
	irrigation_schedule,
	irrigation_schedules,
	recommend_crops,
)
from agroclimate.models.enums import GrowthStage
from agroclimate.schemas.insights import InsightMap, SuitabilityResponse, WeatherAnalysis
from agroclimate.schemas.weather import SoilData, WeatherObservation
from agroclimate.services.advisor_service import AdvisorService

_logger = logging.getLogger("agroclimate.insights")


def _insight_fallback(insights: InsightMap) -> str:
	parts: list[str] = []
	if insights.crop_recommendations:
		top = insights.crop_recommendations[0]
		parts.append(f"{top.name} is the best fit here with a suitability of {top.suitability}/100.")
	if insights.pest_disease_assessment is not None:
		assessment = insights.pest_disease_assessment
		parts.append(
			f"Pest risk is {assessment.pest_risk.level.value} and disease risk is {assessment.disease_risk.level.value}."
		)
	if insights.irrigation_advice is not None:
		parts.append(f"Irrigate {insights.irrigation_advice.frequency.lower()} during the {insights.growth_stage.value} stage.")
	return " ".join(parts)


def _analysis_fallback(analysis: WeatherAnalysis) -> str:
	elevated = [item.hazard.replace("_", " ") for item in analysis.hazards if item.level.severity >= 0.75]
	hazards = ", ".join(elevated) if elevated else "no elevated hazards"
	return (
		f"{analysis.data_points} days analysed with {analysis.rainy_days} rainy days and {hazards}. "
		f"{analysis.recommended_activities[0] if analysis.recommended_activities else ''}"
	).strip()


class InsightService:
	def __init__(self, redis_client: Redis | None = None, advisor: AdvisorService | None = None):
		self.redis_client = redis_client
		self.advisor = advisor or AdvisorService()

	async def get_ai_insights(
		self,
		location: str,
		current_weather: WeatherObservation | None,
		soil_data: SoilData | None,
		crop: str = "maize",
		growth_stage: GrowthStage = GrowthStage.vegetative,
		candidate_crops: list[str] | None = None,
		reference_date: date | None = None,
	) -> InsightMap:
		"""Crop ranking, pest/disease risk, irrigation and calendar for the given conditions.

		Without both current weather and soil data the map is returned empty
		and the advisor is not consulted.
		"""
		place = resolve_location(location)
		reference = reference_date or datetime.now(UTC).date()
		if current_weather is None or soil_data is None:
			return InsightMap(location=place.name, crop=crop, growth_stage=growth_stage, reference_date=reference)

		candidates = list(candidate_crops) if candidate_crops else [info.name for info in CROP_CATALOG.values()]
		if crop.strip().lower() not in {name.strip().lower() for name in candidates}:
			candidates.append(crop)

		insights = InsightMap(
			location=place.name,
			crop=crop,
			growth_stage=growth_stage,
			reference_date=reference,
			crop_recommendations=recommend_crops(candidates, soil_data, current_weather),
			pest_disease_assessment=assess_pest_disease(crop, growth_stage, current_weather),
			irrigation_advice=irrigation_schedule(crop, growth_stage, soil_data, current_weather),
			irrigation_schedules=irrigation_schedules(crop, soil_data, current_weather),
			farming_calendar=farming_calendar(crop, reference.year, resolve_zone(place.zone)),
		)
		note = await self.advisor.narrate(
			topic="crop_insights",
			context=insights.model_dump(mode="json", exclude={"irrigation_schedules", "farming_calendar"}),
			fallback=_insight_fallback(insights),
		)
		_logger.info(
			"insights_generated",
			extra={"location": place.name, "crop": crop, "candidates": len(candidates)},
		)
		return insights.model_copy(update={"advisor_note": note})

	async def get_ai_weather_analysis(
		self,
		location: str,
		historical_data: list[WeatherObservation],
		days_ahead: int = 7,
	) -> WeatherAnalysis:
		place = resolve_location(location)
		analysis = analyze_weather(place.name, historical_data, days_ahead)
		if analysis.data_points == 0:
			return analysis

		note = await self.advisor.narrate(
			topic="weather_analysis",
			context=analysis.model_dump(mode="json", exclude={"anomalies"}),
			fallback=_analysis_fallback(analysis),
		)
		_logger.info(
			"weather_analysis_generated",
			extra={"location": place.name, "data_points": analysis.data_points, "anomalies": len(analysis.anomalies)},
		)
		return analysis.model_copy(update={"advisor_note": note})

	def calculate_suitability(
		self,
		crop: str,
		soil_data: SoilData,
		weather: WeatherObservation | None = None,
	) -> SuitabilityResponse:
		return SuitabilityResponse(
			crop=crop,
			suitability=calculate_suitability(crop, soil_data, weather),
			recommendation=create_crop_recommendation(crop, soil_data, weather),
		)
