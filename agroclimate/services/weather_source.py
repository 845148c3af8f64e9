"""Historical weather observations from the Open-Meteo archive, cached in Redis."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

import httpx
from redis.asyncio import Redis

from agroclimate.config import get_settings
from agroclimate.engine.climatology import resolve_location
from agroclimate.errors import DataUnavailableError, InvalidParameterError
from agroclimate.schemas.weather import WeatherObservation
from agroclimate.services.upstream import fetch_json

SOURCE_NAME = "weather archive"
DAILY_FIELDS = (
	"temperature_2m_mean",
	"relative_humidity_2m_mean",
	"precipitation_sum",
	"wind_speed_10m_max",
	"surface_pressure_mean",
)


def parse_daily(payload: dict[str, Any]) -> list[WeatherObservation]:
	"""Turn an Open-Meteo ``daily`` block into observations, skipping days with gaps."""
	daily = payload.get("daily")
	if not isinstance(daily, dict) or not isinstance(daily.get("time"), list):
		raise DataUnavailableError(SOURCE_NAME, "response has no daily series")

	times = daily["time"]
	columns = {field: daily.get(field) or [None] * len(times) for field in DAILY_FIELDS}
	if any(len(values) != len(times) for values in columns.values()):
		raise DataUnavailableError(SOURCE_NAME, "daily series have mismatched lengths")

	observations: list[WeatherObservation] = []
	for index, stamp in enumerate(times):
		temperature = columns["temperature_2m_mean"][index]
		humidity = columns["relative_humidity_2m_mean"][index]
		if temperature is None or humidity is None:
			continue
		try:
			observations.append(
				WeatherObservation(
					timestamp=datetime.fromisoformat(stamp),
					temperature=temperature,
					humidity=humidity,
					precipitation=columns["precipitation_sum"][index] or 0.0,
					wind_speed=columns["wind_speed_10m_max"][index] or 0.0,
					pressure=columns["surface_pressure_mean"][index],
				)
			)
		except (TypeError, ValueError) as exc:
			raise DataUnavailableError(SOURCE_NAME, f"malformed observation for {stamp}") from exc
	return observations


class WeatherSource:
	def __init__(self, redis_client: Redis | None = None, http_client: httpx.AsyncClient | None = None):
		self.redis_client = redis_client
		self.http_client = http_client
		self.settings = get_settings()

	async def fetch_observations(self, location: str, start_date: date, end_date: date) -> list[WeatherObservation]:
		"""Ordered daily observations for a known location over an inclusive date range."""
		place = resolve_location(location)
		if start_date > end_date:
			raise InvalidParameterError(f"start_date {start_date} is after end_date {end_date}")

		cache_key = f"weather:{place.name.lower()}:{start_date.isoformat()}:{end_date.isoformat()}"
		if self.redis_client is not None:
			cached = await self.redis_client.get(cache_key)
			if cached is not None:
				return [WeatherObservation.model_validate(item) for item in json.loads(cached)]

		payload = await fetch_json(
			source=SOURCE_NAME,
			op="fetch_observations",
			url=self.settings.weather_archive_url,
			params={
				"latitude": place.latitude,
				"longitude": place.longitude,
				"start_date": start_date.isoformat(),
				"end_date": end_date.isoformat(),
				"daily": ",".join(DAILY_FIELDS),
				"timezone": self.settings.upstream_timezone,
			},
			timeout=self.settings.upstream_timeout_seconds,
			client=self.http_client,
		)
		observations = parse_daily(payload)

		if self.redis_client is not None:
			await self.redis_client.setex(
				cache_key,
				self.settings.observation_cache_ttl_seconds,
				json.dumps([item.model_dump(mode="json") for item in observations]),
			)
		return observations
