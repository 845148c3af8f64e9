"""Seasonal forecast orchestration: location resolution, recent observations, bundle generation."""

from __future__ import annotations

import logging
import time
from datetime import UTC, date, datetime, timedelta

from redis.asyncio import Redis

from agroclimate.config import get_settings
from agroclimate.engine.climatology import resolve_location
from agroclimate.engine.forecast import generate_seasonal_prediction, validate_forecast_request
from agroclimate.models.enums import ClimateZone, EnsoStatus, RiskLevel
from agroclimate.schemas.forecast import PredictionBundle
from agroclimate.schemas.weather import WeatherObservation
from agroclimate.services.weather_source import WeatherSource

_logger = logging.getLogger("agroclimate.forecast")


class ForecastService:
	def __init__(self, redis_client: Redis | None = None, weather_source: WeatherSource | None = None):
		self.redis_client = redis_client
		self.weather_source = weather_source or WeatherSource(redis_client)
		self.settings = get_settings()

	async def recent_observations(self, location: str, reference_date: date) -> list[WeatherObservation]:
		end_date = reference_date - timedelta(days=1)
		start_date = end_date - timedelta(days=self.settings.recent_anomaly_window_days - 1)
		return await self.weather_source.fetch_observations(location, start_date, end_date)

	async def generate_seasonal_prediction(
		self,
		location: str,
		climate_zone: ClimateZone | str | None = None,
		prediction_months: int = 6,
		enso_status: EnsoStatus | str = EnsoStatus.neutral,
		reference_date: date | None = None,
		use_recent_observations: bool = True,
	) -> PredictionBundle:
		place = resolve_location(location)
		zone, enso = validate_forecast_request(
			climate_zone if climate_zone is not None else place.zone,
			prediction_months,
			enso_status,
		)
		reference = reference_date or datetime.now(UTC).date()
		recent = await self.recent_observations(place.name, reference) if use_recent_observations else None

		start = time.perf_counter()
		bundle = generate_seasonal_prediction(
			place,
			zone.zone,
			prediction_months,
			enso,
			reference_date=reference,
			recent_observations=recent,
		)
		_logger.info(
			"seasonal_prediction_generated",
			extra={
				"location": place.name,
				"climate_zone": bundle.climate_zone.value,
				"enso_status": bundle.enso_status.value,
				"prediction_months": prediction_months,
				"recent_observations": len(recent or []),
				"drought_risk": bundle.drought_risk.risk_level.value,
				"duration_ms": round((time.perf_counter() - start) * 1000.0, 2),
			},
		)
		if bundle.drought_risk.risk_level == RiskLevel.high:
			_logger.warning("high_drought_risk", extra={"location": place.name, "overall_risk": bundle.drought_risk.overall_risk})
		return bundle
