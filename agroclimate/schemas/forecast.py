"""Pydantic schemas for seasonal forecasts and drought risk."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from agroclimate.models.enums import ClimateZone, EnsoStatus, RiskLevel, SeasonalType, Trend


class TemperatureOutlook(BaseModel):
	model_config = ConfigDict(frozen=True)

	average: float
	min: float
	max: float


class RainfallOutlook(BaseModel):
	model_config = ConfigDict(frozen=True)

	total: float = Field(ge=0.0)
	variability: float = Field(ge=0.0)
	rainy_days: int = Field(ge=0)


class Climatology(BaseModel):
	"""Long-run normals for the target month, used as the drought baseline."""

	model_config = ConfigDict(frozen=True)

	temperature: float
	rainfall: float = Field(ge=0.0)


class MonthlyPrediction(BaseModel):
	model_config = ConfigDict(frozen=True)

	month: int = Field(ge=1, le=12)
	month_name: str
	year: int
	horizon: int = Field(ge=0)
	temperature: TemperatureOutlook
	rainfall: RainfallOutlook
	humidity: float
	wind_speed: float
	conditions: list[str] = Field(default_factory=list)
	description: str
	confidence: float = Field(ge=0.0, le=1.0)
	climatology: Climatology


class SeasonalSummary(BaseModel):
	model_config = ConfigDict(frozen=True)

	average_temperature: float
	total_rainfall: float
	average_humidity: float
	temperature_trend: Trend
	rainfall_trend: Trend
	seasonal_type: SeasonalType
	description: str


class DroughtRiskAssessment(BaseModel):
	model_config = ConfigDict(frozen=True)

	risk_level: RiskLevel
	overall_risk: float = Field(ge=0.0, le=1.0)
	rainfall_deficit: float = Field(ge=0.0, le=1.0)
	temperature_excess: float = Field(ge=0.0)
	triggering_factors: list[str] = Field(default_factory=list)
	recommendations: list[str] = Field(default_factory=list)


class PredictionBundle(BaseModel):
	model_config = ConfigDict(frozen=True)

	algorithm: str = "RBSWSA"
	location: str
	climate_zone: ClimateZone
	enso_status: EnsoStatus
	prediction_months: int
	reference_date: date
	seasonal_summary: SeasonalSummary
	monthly_predictions: list[MonthlyPrediction]
	drought_risk: DroughtRiskAssessment
	farming_recommendations: list[str] = Field(default_factory=list)
