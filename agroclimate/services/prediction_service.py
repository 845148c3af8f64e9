"""Long-term agro-climatic prediction: history, soil, patterns and alerts combined."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta

from redis.asyncio import Redis

from agroclimate.config import get_settings
from agroclimate.engine.agronomy import build_long_term_prediction, is_critical_alert
from agroclimate.engine.climatology import resolve_location, resolve_zone
from agroclimate.engine.patterns import analyze_patterns
from agroclimate.errors import InvalidParameterError
from agroclimate.models.enums import NotificationPriority, NotificationType
from agroclimate.schemas.prediction import AgroClimaticPrediction
from agroclimate.services.notification_service import NotificationDispatcher
from agroclimate.services.soil_source import SoilSource
from agroclimate.services.weather_source import WeatherSource

_logger = logging.getLogger("agroclimate.prediction")

MAX_DAYS_AHEAD = 365


def _alert_kind(alert: str) -> tuple[NotificationType, NotificationPriority]:
	lowered = alert.lower()
	if "frost" in lowered:
		return NotificationType.frost_warning, NotificationPriority.high
	if "drought" in lowered:
		return NotificationType.drought_warning, NotificationPriority.high
	return NotificationType.weather_alert, NotificationPriority.normal


class PredictionService:
	def __init__(
		self,
		redis_client: Redis | None = None,
		weather_source: WeatherSource | None = None,
		soil_source: SoilSource | None = None,
		dispatcher: NotificationDispatcher | None = None,
	):
		self.redis_client = redis_client
		self.weather_source = weather_source or WeatherSource(redis_client)
		self.soil_source = soil_source or SoilSource()
		self.dispatcher = dispatcher or NotificationDispatcher(redis_client)
		self.settings = get_settings()

	async def generate_long_term_prediction(self, location: str, start_date: date, days_ahead: int) -> AgroClimaticPrediction:
		"""Predict conditions ``days_ahead`` days after ``start_date``.

		Any failing sub-step propagates; no partial prediction is returned.
		"""
		place = resolve_location(location)
		if isinstance(days_ahead, bool) or not 0 <= days_ahead <= MAX_DAYS_AHEAD:
			raise InvalidParameterError(f"days_ahead must be within 0..{MAX_DAYS_AHEAD}, got {days_ahead}")
		zone = resolve_zone(place.zone)

		history_end = start_date - timedelta(days=1)
		history_start = start_date - timedelta(days=self.settings.long_term_history_days)
		# A failed fetch cancels its sibling; the first failure is re-raised as is.
		try:
			async with asyncio.TaskGroup() as group:
				history_task = group.create_task(
					self.weather_source.fetch_observations(place.name, history_start, history_end)
				)
				soil_task = group.create_task(self.soil_source.fetch_soil(place.name))
		except ExceptionGroup as group_error:
			raise group_error.exceptions[0]
		observations = history_task.result()
		soil = soil_task.result()

		patterns = analyze_patterns(observations, zone, place)
		prediction = build_long_term_prediction(place, zone, start_date, days_ahead, patterns, soil)
		await self._dispatch_alerts(prediction)

		_logger.info(
			"long_term_prediction_generated",
			extra={
				"location": place.name,
				"days_ahead": days_ahead,
				"patterns": len(patterns),
				"alerts": len(prediction.weather_alerts),
			},
		)
		return prediction

	async def _dispatch_alerts(self, prediction: AgroClimaticPrediction) -> None:
		for alert in prediction.weather_alerts:
			if not is_critical_alert(alert):
				continue
			notification_type, priority = _alert_kind(alert)
			await self.dispatcher.notify(
				location=prediction.location,
				title=alert,
				body=(
					f"{alert} for {prediction.location} on {prediction.date.isoformat()}: "
					f"{prediction.temperature:.1f}°C, {prediction.humidity:.0f}% humidity, "
					f"{prediction.precipitation:.1f} mm rain expected."
				),
				type=notification_type,
				priority=priority,
			)
