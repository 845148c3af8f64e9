"""Outbound notifications published to Redis for the live alerts feed."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from redis.asyncio import Redis
from redis.exceptions import RedisError

from agroclimate.errors import DataUnavailableError
from agroclimate.models.enums import NotificationPriority, NotificationType
from agroclimate.schemas.locations import Notification

_logger = logging.getLogger("agroclimate.notifications")

SOURCE_NAME = "notifications"


def alerts_channel(location: str) -> str:
	return f"alerts:{location.strip().lower().replace(' ', '_')}"


class NotificationDispatcher:
	"""Accepts (title, body, type, priority) and hands delivery to subscribers.

	Without a Redis client notifications are only logged.
	"""

	def __init__(self, redis_client: Redis | None = None):
		self.redis_client = redis_client

	async def notify(
		self,
		*,
		location: str,
		title: str,
		body: str,
		type: NotificationType,
		priority: NotificationPriority = NotificationPriority.normal,
	) -> Notification:
		notification = Notification(
			title=title,
			body=body,
			type=type,
			priority=priority,
			location=location,
			created_at=datetime.now(UTC),
		)
		await self.dispatch(notification)
		return notification

	async def dispatch(self, notification: Notification) -> None:
		_logger.info(
			"notification_dispatched",
			extra={
				"location": notification.location,
				"notification_type": notification.type.value,
				"priority": notification.priority.value,
				"published": self.redis_client is not None,
			},
		)
		if self.redis_client is None:
			return
		try:
			await self.redis_client.publish(alerts_channel(notification.location), notification.model_dump_json())
		except RedisError as exc:
			_logger.error("notification_publish_failed", extra={"location": notification.location, "error": str(exc)})
			raise DataUnavailableError(SOURCE_NAME, f"publish failed: {exc}") from exc
