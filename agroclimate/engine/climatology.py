"""Static climatology tables for Zimbabwe's agro-ecological zones.

Zone normals, month-of-year modifiers and ENSO adjustments drive both the
seasonal forecast and the pattern anomaly baseline. The location registry maps
each supported town to coordinates, a default zone and small local offsets.
"""

from __future__ import annotations

from dataclasses import dataclass

from agroclimate.errors import InvalidParameterError, UnknownLocationError
from agroclimate.models.enums import ClimateZone, EnsoStatus, Season

MONTH_NAMES = (
	"January",
	"February",
	"March",
	"April",
	"May",
	"June",
	"July",
	"August",
	"September",
	"October",
	"November",
	"December",
)


@dataclass(frozen=True, slots=True)
class ZoneProfile:
	zone: ClimateZone
	altitude_m: int
	average_temperature: float
	annual_rainfall: float
	rainy_months: tuple[int, ...]
	frost_months: tuple[int, ...]
	planting_window: tuple[int, ...]
	suitable_crops: tuple[str, ...]
	soil_type: str
	description: str


@dataclass(frozen=True, slots=True)
class MonthlyRule:
	temperature: float
	rainfall: float
	humidity: float
	wind: float
	description: str


@dataclass(frozen=True, slots=True)
class EnsoEffect:
	temperature: float
	rainfall: float
	drought_bias: float
	description: str


@dataclass(frozen=True, slots=True)
class Location:
	name: str
	latitude: float
	longitude: float
	zone: ClimateZone
	temperature_offset: float = 0.0
	rainfall_factor: float = 1.0


ZONES: dict[ClimateZone, ZoneProfile] = {
	ClimateZone.highveld: ZoneProfile(
		zone=ClimateZone.highveld,
		altitude_m=1200,
		average_temperature=19.5,
		annual_rainfall=825.0,
		rainy_months=(10, 11, 12, 1, 2, 3),
		frost_months=(5, 6, 7),
		planting_window=(11, 12),
		suitable_crops=("maize", "tobacco", "wheat", "soybeans", "cotton"),
		soil_type="Red-brown sandy loams",
		description="Central plateau around Harare - main agricultural zone",
	),
	ClimateZone.lowveld: ZoneProfile(
		zone=ClimateZone.lowveld,
		altitude_m=300,
		average_temperature=24.5,
		annual_rainfall=450.0,
		rainy_months=(11, 12, 1, 2, 3),
		frost_months=(),
		planting_window=(12, 1),
		suitable_crops=("sugarcane", "cotton", "sorghum", "millet"),
		soil_type="Sandy soils, alluvial in river valleys",
		description="Southern lowlands around Chiredzi and Triangle - hotter, drier",
	),
	ClimateZone.middleveld: ZoneProfile(
		zone=ClimateZone.middleveld,
		altitude_m=900,
		average_temperature=21.0,
		annual_rainfall=650.0,
		rainy_months=(10, 11, 12, 1, 2, 3),
		frost_months=(6, 7),
		planting_window=(11, 12),
		suitable_crops=("maize", "groundnuts", "sunflower", "tobacco"),
		soil_type="Red and brown loamy soils",
		description="Intermediate zone around Gweru and Kwekwe - mixed farming",
	),
	ClimateZone.eastern_highlands: ZoneProfile(
		zone=ClimateZone.eastern_highlands,
		altitude_m=1500,
		average_temperature=17.5,
		annual_rainfall=1200.0,
		rainy_months=(9, 10, 11, 12, 1, 2, 3, 4),
		frost_months=(5, 6, 7, 8),
		planting_window=(10, 11),
		suitable_crops=("tea", "coffee", "timber", "wheat", "potatoes"),
		soil_type="Acidic mountain soils",
		description="Nyanga and Chimanimani - high rainfall tea and coffee zone",
	),
	ClimateZone.zambezi_valley: ZoneProfile(
		zone=ClimateZone.zambezi_valley,
		altitude_m=400,
		average_temperature=26.0,
		annual_rainfall=600.0,
		rainy_months=(11, 12, 1, 2, 3),
		frost_months=(),
		planting_window=(12, 1),
		suitable_crops=("cotton", "sorghum", "millet", "sunflower"),
		soil_type="Alluvial and sandy soils",
		description="Northern valley around Kariba and Mana Pools - hot",
	),
}

MONTHLY_RULES: dict[int, MonthlyRule] = {
	1: MonthlyRule(0.4, 1.5, 1.3, 0.8, "Peak rainy season with high humidity"),
	2: MonthlyRule(0.35, 1.2, 1.2, 0.9, "Late rainy season, warm and humid"),
	3: MonthlyRule(0.2, 0.8, 1.0, 1.0, "End of rainy season, transition to dry"),
	4: MonthlyRule(-0.1, 0.3, 0.7, 1.1, "Early dry season, temperatures falling"),
	5: MonthlyRule(-0.5, 0.1, 0.5, 1.2, "Mid dry season, cool and dry conditions"),
	6: MonthlyRule(-0.8, 0.05, 0.4, 1.3, "Peak dry season, cold nights"),
	7: MonthlyRule(-0.8, 0.05, 0.4, 1.2, "Mid dry season, cold and dry"),
	8: MonthlyRule(-0.5, 0.1, 0.5, 1.1, "Late dry season, warming days"),
	9: MonthlyRule(0.0, 0.2, 0.6, 1.0, "End of dry season, hot and dry"),
	10: MonthlyRule(0.5, 0.6, 0.8, 0.9, "Early rainy season, hottest month, first rains"),
	11: MonthlyRule(0.5, 1.0, 1.1, 0.8, "Mid rainy season, regular rainfall"),
	12: MonthlyRule(0.4, 1.3, 1.2, 0.8, "Peak rainy season, heavy rainfall"),
}

ENSO_EFFECTS: dict[EnsoStatus, EnsoEffect] = {
	EnsoStatus.el_nino: EnsoEffect(
		temperature=0.3,
		rainfall=-0.4,
		drought_bias=0.7,
		description="El Niño: Hotter, drier conditions, increased drought risk",
	),
	EnsoStatus.la_nina: EnsoEffect(
		temperature=-0.2,
		rainfall=0.3,
		drought_bias=-0.3,
		description="La Niña: Cooler, wetter conditions, reduced drought risk",
	),
	EnsoStatus.neutral: EnsoEffect(
		temperature=0.0,
		rainfall=0.0,
		drought_bias=0.0,
		description="Neutral: Normal seasonal patterns",
	),
}

DAYS_PER_MONTH = 30.4

_RAINFALL_WEIGHT_TOTAL = sum(rule.rainfall for rule in MONTHLY_RULES.values())

LOCATIONS: dict[str, Location] = {
	loc.name.lower(): loc
	for loc in (
		Location("Harare", -17.8252, 31.0335, ClimateZone.highveld),
		Location("Bulawayo", -20.1569, 28.5891, ClimateZone.highveld, 1.0, 0.7),
		Location("Chitungwiza", -18.0128, 31.0756, ClimateZone.highveld),
		Location("Mutare", -18.9707, 32.6722, ClimateZone.eastern_highlands, 0.5, 1.3),
		Location("Gweru", -19.45, 29.8167, ClimateZone.middleveld),
		Location("Kwekwe", -18.9283, 29.8149, ClimateZone.middleveld),
		Location("Kadoma", -18.3333, 29.9167, ClimateZone.middleveld),
		Location("Masvingo", -20.0744, 30.8328, ClimateZone.middleveld, 0.5, 0.9),
		Location("Chinhoyi", -17.3667, 30.2, ClimateZone.highveld),
		Location("Bindura", -17.3019, 31.3306, ClimateZone.highveld),
		Location("Marondera", -18.1853, 31.5519, ClimateZone.highveld, -0.5, 1.05),
		Location("Victoria Falls", -17.9243, 25.8572, ClimateZone.zambezi_valley),
		Location("Hwange", -18.3644, 26.4981, ClimateZone.zambezi_valley),
		Location("Gwanda", -20.9333, 29.0, ClimateZone.lowveld, 0.0, 0.9),
	)
}


def resolve_location(name: str) -> Location:
	key = name.strip().lower().replace("_", " ").replace("-", " ")
	location = LOCATIONS.get(key)
	if location is None:
		raise UnknownLocationError(name)
	return location


def resolve_zone(value: ClimateZone | str) -> ZoneProfile:
	try:
		zone = ClimateZone(str(value).strip().lower())
	except ValueError as exc:
		raise InvalidParameterError(f"unknown climate zone: {value!r}") from exc
	return ZONES[zone]


def resolve_enso(value: EnsoStatus | str) -> EnsoStatus:
	try:
		return EnsoStatus(value)
	except ValueError as exc:
		raise InvalidParameterError(f"unknown ENSO status: {value!r}") from exc


def monthly_normals(zone: ZoneProfile, month: int, location: Location | None = None) -> tuple[float, float, float, float]:
	"""Return (temperature, rainfall, humidity, wind) normals for one calendar month."""
	rule = MONTHLY_RULES[month]
	temp_offset = location.temperature_offset if location is not None else 0.0
	rain_factor = location.rainfall_factor if location is not None else 1.0

	temperature = zone.average_temperature + rule.temperature * 5.0 + temp_offset
	rainfall = zone.annual_rainfall * rule.rainfall / _RAINFALL_WEIGHT_TOTAL * rain_factor
	humidity = 60.0 + (rule.humidity - 1.0) * 20.0
	wind = 10.0 + (rule.wind - 1.0) * 5.0
	return temperature, rainfall, humidity, wind


def season_normals(zone: ZoneProfile, season: Season, location: Location | None = None) -> tuple[float, float, float]:
	"""Mean temperature, mean daily rainfall and mean humidity across a season's months."""
	rows = [monthly_normals(zone, month, location) for month in season.months]
	temperature = sum(row[0] for row in rows) / len(rows)
	daily_rainfall = sum(row[1] for row in rows) / (len(rows) * DAYS_PER_MONTH)
	humidity = sum(row[2] for row in rows) / len(rows)
	return temperature, daily_rainfall, humidity
