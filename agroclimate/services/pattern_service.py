"""Historical seasonal pattern analysis for a location and date range."""

from __future__ import annotations

import logging
from datetime import date

from redis.asyncio import Redis

from agroclimate.config import get_settings
from agroclimate.engine.climatology import resolve_location, resolve_zone
from agroclimate.engine.patterns import analyze_monthly_patterns, analyze_patterns
from agroclimate.errors import InvalidParameterError
from agroclimate.schemas.patterns import PatternAnalysisResponse
from agroclimate.services.weather_source import WeatherSource

_logger = logging.getLogger("agroclimate.patterns")


class PatternService:
	def __init__(self, redis_client: Redis | None = None, weather_source: WeatherSource | None = None):
		self.redis_client = redis_client
		self.weather_source = weather_source or WeatherSource(redis_client)
		self.settings = get_settings()

	async def analyze_sequential_patterns(self, location: str, start_date: date, end_date: date) -> PatternAnalysisResponse:
		place = resolve_location(location)
		if start_date > end_date:
			raise InvalidParameterError(f"start_date {start_date} is after end_date {end_date}")

		cache_key = f"patterns:{place.name.lower()}:{start_date.isoformat()}:{end_date.isoformat()}"
		if self.redis_client is not None:
			cached = await self.redis_client.get(cache_key)
			if cached is not None:
				response = PatternAnalysisResponse.model_validate_json(cached)
				return response.model_copy(update={"cached": True})

		observations = await self.weather_source.fetch_observations(place.name, start_date, end_date)
		zone = resolve_zone(place.zone)
		patterns = analyze_patterns(observations, zone, place)
		monthly_patterns = analyze_monthly_patterns(observations, zone, place)
		_logger.info(
			"patterns_analyzed",
			extra={
				"location": place.name,
				"observations": len(observations),
				"patterns": len(patterns),
				"monthly_patterns": len(monthly_patterns),
			},
		)
		response = PatternAnalysisResponse(
			location=place.name,
			start_date=start_date,
			end_date=end_date,
			observation_count=len(observations),
			patterns=patterns,
			monthly_patterns=monthly_patterns,
		)

		if self.redis_client is not None:
			await self.redis_client.setex(cache_key, self.settings.observation_cache_ttl_seconds, response.model_dump_json())
		return response
