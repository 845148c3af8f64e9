"""Pydantic schemas for upstream weather and soil snapshots."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WeatherObservation(BaseModel):
	model_config = ConfigDict(frozen=True)

	timestamp: datetime
	temperature: float = Field(ge=-60.0, le=60.0)
	humidity: float = Field(ge=0.0, le=100.0)
	precipitation: float = Field(default=0.0, ge=0.0)
	wind_speed: float = Field(default=0.0, ge=0.0)
	pressure: float | None = Field(default=None, gt=0.0)

	@field_validator("timestamp")
	@classmethod
	def _assume_utc(cls, value: datetime) -> datetime:
		# Naive timestamps are read as UTC so mixed inputs stay comparable.
		if value.tzinfo is None:
			return value.replace(tzinfo=UTC)
		return value


class SoilData(BaseModel):
	model_config = ConfigDict(frozen=True)

	location: str
	ph: float = Field(ge=0.0, le=14.0)
	organic_matter: float = Field(ge=0.0, le=100.0)
	nitrogen: float = Field(default=0.0, ge=0.0)
	phosphorus: float = Field(default=0.0, ge=0.0)
	potassium: float = Field(default=0.0, ge=0.0)
	soil_moisture: float = Field(default=0.0, ge=0.0, le=100.0)
	soil_temperature: float = 0.0
	soil_type: str = "Loam"
	drainage: str = "Good"
	texture: str = "Medium"
	last_updated: datetime
