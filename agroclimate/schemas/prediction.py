"""Pydantic schemas for the long-term agro-climatic prediction composite."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from agroclimate.models.enums import Trend
from agroclimate.schemas.insights import RiskIndicator


class SoilConditions(BaseModel):
	model_config = ConfigDict(frozen=True)

	moisture_level: float
	temperature: float
	ph_level: float | None = None
	nutrient_status: str
	drainage: str


class ClimateIndicators(BaseModel):
	"""Trend labels are ``None`` when there is not enough history to fit one."""

	model_config = ConfigDict(frozen=True)

	temperature_trend: Trend | None = None
	precipitation_trend: Trend | None = None
	humidity_trend: Trend | None = None
	seasonal_deviation: float | None = None
	climate_risk_index: float = Field(ge=0.0, le=1.0)


class AgroClimaticPrediction(BaseModel):
	model_config = ConfigDict(frozen=True)

	location: str
	date: dt.date
	days_ahead: int
	temperature: float
	humidity: float
	precipitation: float
	soil_moisture: float
	evapotranspiration: float
	crop_recommendation: str | None = None
	yield_prediction: float = Field(ge=0.0, le=100.0)
	irrigation_advice: str
	planting_advice: str | None = None
	harvesting_advice: str
	pest_risk: RiskIndicator
	disease_risk: RiskIndicator
	weather_alerts: list[str] = Field(default_factory=list)
	soil_conditions: SoilConditions
	climate_indicators: ClimateIndicators
	patterns_analyzed: int = 0
