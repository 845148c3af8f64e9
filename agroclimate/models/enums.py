"""Closed enumerations used across the engine, schemas and routes.

Every categorical value that travels through the API is a StrEnum so that
pydantic validates it on the way in and serializes it as its plain value.
"""

from __future__ import annotations

import unicodedata
from enum import StrEnum

# ── Calendar & climate ──────────────────────────────────────────────────────


class Season(StrEnum):
	"""Southern-hemisphere meteorological seasons."""

	summer = "summer"
	autumn = "autumn"
	winter = "winter"
	spring = "spring"

	@classmethod
	def for_month(cls, month: int) -> "Season":
		if month in (12, 1, 2):
			return cls.summer
		if month in (3, 4, 5):
			return cls.autumn
		if month in (6, 7, 8):
			return cls.winter
		return cls.spring

	@property
	def months(self) -> tuple[int, int, int]:
		return {
			Season.summer: (12, 1, 2),
			Season.autumn: (3, 4, 5),
			Season.winter: (6, 7, 8),
			Season.spring: (9, 10, 11),
		}[self]


class PatternType(StrEnum):
	hot_wet = "hot_wet"
	hot_dry = "hot_dry"
	cool_wet = "cool_wet"
	cool_dry = "cool_dry"
	moderate = "moderate"


class ClimateZone(StrEnum):
	"""Agro-ecological regions with their own base climatology table."""

	highveld = "highveld"
	middleveld = "middleveld"
	lowveld = "lowveld"
	eastern_highlands = "eastern_highlands"
	zambezi_valley = "zambezi_valley"


class EnsoStatus(StrEnum):
	"""El Niño–Southern Oscillation phase."""

	neutral = "neutral"
	el_nino = "el_nino"
	la_nina = "la_nina"

	@classmethod
	def _missing_(cls, value: object) -> "EnsoStatus | None":
		if not isinstance(value, str):
			return None
		folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
		key = folded.strip().lower().replace("-", "_").replace(" ", "_")
		for member in cls:
			if member.value == key:
				return member
		return None


class SeasonalType(StrEnum):
	wet = "wet"
	dry = "dry"
	transition = "transition"


class Trend(StrEnum):
	increasing = "increasing"
	decreasing = "decreasing"
	stable = "stable"


# ── Risk & scheduling ───────────────────────────────────────────────────────


class RiskLevel(StrEnum):
	"""Three-way drought risk bucket."""

	low = "low"
	medium = "medium"
	high = "high"


class HazardLevel(StrEnum):
	"""Four-way risk level for pests, diseases and weather hazards."""

	low = "low"
	medium = "medium"
	high = "high"
	critical = "critical"

	@property
	def severity(self) -> float:
		return {
			HazardLevel.low: 0.25,
			HazardLevel.medium: 0.5,
			HazardLevel.high: 0.75,
			HazardLevel.critical: 1.0,
		}[self]


class IrrigationPriority(StrEnum):
	low = "low"
	medium = "medium"
	high = "high"
	critical = "critical"


class GrowthStage(StrEnum):
	planting = "planting"
	vegetative = "vegetative"
	flowering = "flowering"
	fruiting = "fruiting"
	maturity = "maturity"


class NotificationType(StrEnum):
	weather_alert = "weather_alert"
	drought_warning = "drought_warning"
	frost_warning = "frost_warning"
	advisory = "advisory"


class NotificationPriority(StrEnum):
	low = "low"
	normal = "normal"
	high = "high"
