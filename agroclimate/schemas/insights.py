"""Pydantic schemas for crop insights, irrigation and weather analysis endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from agroclimate.models.enums import GrowthStage, HazardLevel, IrrigationPriority
from agroclimate.schemas.weather import SoilData, WeatherObservation


class CropRecommendation(BaseModel):
	model_config = ConfigDict(frozen=True)

	name: str
	variety: str
	planting_date: str
	harvest_date: str
	expected_yield: str
	suitability: int = Field(ge=0, le=100)
	description: str
	requirements: str
	benefits: list[str] = Field(default_factory=list)
	challenges: list[str] = Field(default_factory=list)


class IrrigationSchedule(BaseModel):
	model_config = ConfigDict(frozen=True)

	crop: str
	growth_stage: GrowthStage
	frequency: str
	duration: str
	amount: str
	time_of_day: str
	priority: IrrigationPriority
	description: str
	tips: list[str] = Field(default_factory=list)


class RiskIndicator(BaseModel):
	model_config = ConfigDict(frozen=True)

	level: HazardLevel
	severity: float = Field(ge=0.0, le=1.0)

	@classmethod
	def of(cls, level: HazardLevel) -> "RiskIndicator":
		return cls(level=level, severity=level.severity)


class PestDiseaseAssessment(BaseModel):
	model_config = ConfigDict(frozen=True)

	pest_risk: RiskIndicator
	disease_risk: RiskIndicator
	contributing_factors: list[str] = Field(default_factory=list)
	prevention: list[str] = Field(default_factory=list)
	monitoring_schedule: str


class FarmingCalendar(BaseModel):
	model_config = ConfigDict(frozen=True)

	crop: str
	year: int
	activities: dict[str, list[str]] = Field(default_factory=dict)
	key_activities: list[str] = Field(default_factory=list)
	weather_considerations: str


class InsightRequest(BaseModel):
	current_weather: WeatherObservation | None = None
	soil_data: SoilData | None = None
	crop: str = Field(default="maize", min_length=1, max_length=64)
	growth_stage: GrowthStage = GrowthStage.vegetative
	candidate_crops: list[str] | None = Field(default=None, max_length=20)


class InsightMap(BaseModel):
	location: str
	crop: str
	growth_stage: GrowthStage
	reference_date: date
	crop_recommendations: list[CropRecommendation] = Field(default_factory=list)
	pest_disease_assessment: PestDiseaseAssessment | None = None
	irrigation_advice: IrrigationSchedule | None = None
	irrigation_schedules: list[IrrigationSchedule] = Field(default_factory=list)
	farming_calendar: FarmingCalendar | None = None
	advisor_note: str | None = None


class SuitabilityRequest(BaseModel):
	crop: str = Field(min_length=1, max_length=64)
	soil_data: SoilData
	weather: WeatherObservation | None = None


class SuitabilityResponse(BaseModel):
	crop: str
	suitability: int = Field(ge=0, le=100)
	recommendation: CropRecommendation


# ── Weather analysis ────────────────────────────────────────────────────────


class MetricStatistics(BaseModel):
	model_config = ConfigDict(frozen=True)

	mean: float
	median: float
	minimum: float
	maximum: float
	std: float


class WeatherAnomaly(BaseModel):
	model_config = ConfigDict(frozen=True)

	timestamp: datetime
	metric: str
	value: float
	z_score: float | None = None
	severity: HazardLevel
	description: str


class ClimateIndices(BaseModel):
	model_config = ConfigDict(frozen=True)

	drought_index: float = Field(ge=0.0, le=1.0)
	heat_stress_index: float = Field(ge=0.0)
	comfort_index: float = Field(ge=0.0, le=100.0)
	climate_type: str


class HazardAssessment(BaseModel):
	model_config = ConfigDict(frozen=True)

	hazard: str
	level: HazardLevel
	mitigation: list[str] = Field(default_factory=list)


class WeatherAnalysisRequest(BaseModel):
	historical_data: list[WeatherObservation] = Field(default_factory=list, max_length=5000)
	days_ahead: int = Field(default=7, ge=1, le=90)

	@model_validator(mode="after")
	def _order_observations(self) -> "WeatherAnalysisRequest":
		self.historical_data = sorted(self.historical_data, key=lambda item: item.timestamp)
		return self


class WeatherAnalysis(BaseModel):
	location: str
	days_ahead: int
	data_points: int
	statistics: dict[str, MetricStatistics] = Field(default_factory=dict)
	rainy_days: int = 0
	dry_days: int = 0
	trends: dict[str, float] = Field(default_factory=dict)
	anomalies: list[WeatherAnomaly] = Field(default_factory=list)
	indices: ClimateIndices | None = None
	hazards: list[HazardAssessment] = Field(default_factory=list)
	outlook: dict[str, float] = Field(default_factory=dict)
	recommended_activities: list[str] = Field(default_factory=list)
	advisor_note: str | None = None
