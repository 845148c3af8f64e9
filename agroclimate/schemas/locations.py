"""Pydantic schemas for the location registry and outbound notifications."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from agroclimate.models.enums import ClimateZone, NotificationPriority, NotificationType


class LocationInfo(BaseModel):
	name: str
	latitude: float
	longitude: float
	climate_zone: ClimateZone


class LocationsResponse(BaseModel):
	items: list[LocationInfo] = Field(default_factory=list)


class Notification(BaseModel):
	title: str
	body: str
	type: NotificationType
	priority: NotificationPriority = NotificationPriority.normal
	location: str
	created_at: datetime
