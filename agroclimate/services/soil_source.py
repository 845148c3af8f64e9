"""Soil snapshots: live moisture and temperature from Open-Meteo plus regional soil profiles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx

from agroclimate.config import get_settings
from agroclimate.engine.climatology import resolve_location
from agroclimate.errors import DataUnavailableError
from agroclimate.schemas.weather import SoilData
from agroclimate.services.upstream import fetch_json

SOURCE_NAME = "soil forecast"
HOURLY_FIELDS = ("soil_temperature_0cm", "soil_moisture_0_to_1cm")


@dataclass(frozen=True, slots=True)
class SoilProfile:
	soil_type: str
	texture: str
	drainage: str
	ph: float
	organic_matter: float
	nitrogen: float
	phosphorus: float
	potassium: float


_DEFAULT_PROFILE = SoilProfile("Loam", "Medium", "Good", 6.5, 2.2, 40.0, 20.0, 170.0)

REGIONAL_PROFILES: dict[str, SoilProfile] = {
	"harare": SoilProfile("Red Clay Loam", "Medium", "Good", 6.2, 2.8, 45.0, 25.0, 180.0),
	"chitungwiza": SoilProfile("Red Clay Loam", "Medium", "Good", 6.2, 2.6, 42.0, 24.0, 175.0),
	"bulawayo": SoilProfile("Sandy Loam", "Coarse", "Excessive", 6.8, 1.5, 30.0, 18.0, 140.0),
	"gwanda": SoilProfile("Sandy Loam", "Coarse", "Excessive", 7.0, 1.2, 25.0, 15.0, 130.0),
	"mutare": SoilProfile("Clay Loam", "Fine", "Moderate", 5.6, 3.5, 50.0, 22.0, 200.0),
	"gweru": SoilProfile("Sandy Clay Loam", "Medium", "Good", 6.4, 2.0, 38.0, 20.0, 160.0),
	"kwekwe": SoilProfile("Sandy Clay Loam", "Medium", "Good", 6.4, 1.9, 36.0, 19.0, 155.0),
}


def _first_reading(values: Any) -> float | None:
	if not isinstance(values, list):
		return None
	present = [value for value in values if value is not None]
	return float(present[0]) if present else None


class SoilSource:
	def __init__(self, http_client: httpx.AsyncClient | None = None):
		self.http_client = http_client
		self.settings = get_settings()

	async def fetch_soil(self, location: str) -> SoilData:
		place = resolve_location(location)
		payload = await fetch_json(
			source=SOURCE_NAME,
			op="fetch_soil",
			url=self.settings.soil_forecast_url,
			params={
				"latitude": place.latitude,
				"longitude": place.longitude,
				"hourly": ",".join(HOURLY_FIELDS),
				"forecast_days": 1,
				"timezone": self.settings.upstream_timezone,
			},
			timeout=self.settings.upstream_timeout_seconds,
			client=self.http_client,
		)

		hourly = payload.get("hourly")
		if not isinstance(hourly, dict):
			raise DataUnavailableError(SOURCE_NAME, "response has no hourly series")
		soil_temperature = _first_reading(hourly.get("soil_temperature_0cm"))
		moisture_fraction = _first_reading(hourly.get("soil_moisture_0_to_1cm"))
		if soil_temperature is None or moisture_fraction is None:
			raise DataUnavailableError(SOURCE_NAME, f"no soil readings for {place.name}")

		profile = REGIONAL_PROFILES.get(place.name.lower(), _DEFAULT_PROFILE)
		return SoilData(
			location=place.name,
			ph=profile.ph,
			organic_matter=profile.organic_matter,
			nitrogen=profile.nitrogen,
			phosphorus=profile.phosphorus,
			potassium=profile.potassium,
			soil_moisture=round(min(100.0, max(0.0, moisture_fraction * 100.0)), 2),
			soil_temperature=soil_temperature,
			soil_type=profile.soil_type,
			drainage=profile.drainage,
			texture=profile.texture,
			last_updated=datetime.now(UTC),
		)
