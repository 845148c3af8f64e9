"""Pydantic schemas for historical seasonal pattern analysis."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from agroclimate.models.enums import PatternType, Season


class SeasonalPattern(BaseModel):
	model_config = ConfigDict(frozen=True)

	season: Season
	season_year: int
	start: datetime
	end: datetime
	observation_count: int = Field(ge=1)
	average_temperature: float
	total_precipitation: float
	average_humidity: float
	pattern_type: PatternType
	anomalies: list[str] = Field(default_factory=list)
	trends: dict[str, float] = Field(default_factory=dict)
	summary: str


class MonthlyPattern(BaseModel):
	"""One calendar month of observations, compared against that month's normals."""

	model_config = ConfigDict(frozen=True)

	month: int = Field(ge=1, le=12)
	month_name: str
	year: int
	start: datetime
	end: datetime
	observation_count: int = Field(ge=1)
	average_temperature: float
	total_precipitation: float
	average_humidity: float
	pattern_type: PatternType
	anomalies: list[str] = Field(default_factory=list)
	trends: dict[str, float] = Field(default_factory=dict)
	summary: str


class PatternAnalysisResponse(BaseModel):
	location: str
	start_date: date
	end_date: date
	observation_count: int
	cached: bool = False
	patterns: list[SeasonalPattern] = Field(default_factory=list)
	monthly_patterns: list[MonthlyPattern] = Field(default_factory=list)
