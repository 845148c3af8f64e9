"""Table-driven crop suitability, crop catalog and irrigation scheduling."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from agroclimate.models.enums import GrowthStage, IrrigationPriority
from agroclimate.schemas.insights import CropRecommendation, IrrigationSchedule
from agroclimate.schemas.weather import SoilData, WeatherObservation

BASE_SCORE = 50
PH_OPTIMAL_BONUS = 20
PH_ACCEPTABLE_BONUS = 10
ORGANIC_MATTER_BONUS = 15
TEMPERATURE_OPTIMAL_BONUS = 15
TEMPERATURE_ACCEPTABLE_BONUS = 10


@dataclass(frozen=True, slots=True)
class Band:
	low: float
	high: float

	def __contains__(self, value: float) -> bool:
		return self.low <= value <= self.high


@dataclass(frozen=True, slots=True)
class CropProfile:
	ph_optimal: Band
	ph_acceptable: Band
	organic_matter_min: float
	temperature_optimal: Band
	temperature_acceptable: Band


@dataclass(frozen=True, slots=True)
class CropInfo:
	name: str
	variety: str
	planting_date: str
	harvest_date: str
	expected_yield: str
	description: str
	requirements: str
	benefits: tuple[str, ...]
	challenges: tuple[str, ...]


DEFAULT_PROFILE = CropProfile(
	ph_optimal=Band(6.0, 7.5),
	ph_acceptable=Band(5.5, 8.0),
	organic_matter_min=2.0,
	temperature_optimal=Band(20.0, 30.0),
	temperature_acceptable=Band(15.0, 35.0),
)

CROP_PROFILES: dict[str, CropProfile] = {
	"maize": CropProfile(Band(5.8, 7.0), Band(5.5, 7.5), 2.0, Band(20.0, 30.0), Band(15.0, 35.0)),
	"wheat": CropProfile(Band(6.0, 7.5), Band(5.5, 8.0), 1.5, Band(15.0, 24.0), Band(10.0, 28.0)),
	"sorghum": CropProfile(Band(5.5, 7.5), Band(5.0, 8.5), 1.0, Band(24.0, 32.0), Band(18.0, 38.0)),
	"cotton": CropProfile(Band(5.8, 7.5), Band(5.5, 8.0), 1.5, Band(21.0, 32.0), Band(18.0, 37.0)),
	"tobacco": CropProfile(Band(5.5, 6.5), Band(5.0, 7.0), 2.0, Band(20.0, 28.0), Band(16.0, 32.0)),
}

CROP_CATALOG: dict[str, CropInfo] = {
	"maize": CropInfo(
		name="Maize",
		variety="SC 403",
		planting_date="October - November",
		harvest_date="March - April",
		expected_yield="4-6 tons/ha",
		description="High-yielding hybrid maize suitable for Zimbabwean conditions",
		requirements="Well-drained soil, moderate rainfall",
		benefits=("High yield potential", "Drought tolerant", "Good market demand"),
		challenges=("Requires good soil fertility", "Susceptible to stalk borer"),
	),
	"wheat": CropInfo(
		name="Wheat",
		variety="SC Nduna",
		planting_date="May - June",
		harvest_date="September - October",
		expected_yield="2-4 tons/ha",
		description="Winter wheat variety adapted to Zimbabwean climate",
		requirements="Cool temperatures, adequate moisture",
		benefits=("Good for rotation", "High protein content", "Stable yields"),
		challenges=("Requires cold weather", "Sensitive to heat stress"),
	),
	"sorghum": CropInfo(
		name="Sorghum",
		variety="Macia",
		planting_date="November - December",
		harvest_date="April - May",
		expected_yield="2-3 tons/ha",
		description="Drought-resistant cereal crop ideal for dry regions",
		requirements="Low rainfall, well-drained soil",
		benefits=("Drought tolerant", "Low input requirements", "Good for food security"),
		challenges=("Lower market value", "Bird damage risk"),
	),
	"cotton": CropInfo(
		name="Cotton",
		variety="SJ 2",
		planting_date="November - December",
		harvest_date="May - June",
		expected_yield="1-2 tons/ha",
		description="Cash crop with good export potential",
		requirements="Warm temperatures, adequate rainfall",
		benefits=("High value crop", "Export potential", "Good for rotation"),
		challenges=("High input costs", "Pest management required"),
	),
	"tobacco": CropInfo(
		name="Tobacco",
		variety="Virginia",
		planting_date="September - October",
		harvest_date="February - March",
		expected_yield="2-3 tons/ha",
		description="High-value cash crop for export markets",
		requirements="Warm climate, fertile soil",
		benefits=("High value", "Export market", "Good returns"),
		challenges=("High input costs", "Labor intensive", "Market volatility"),
	),
}


def _crop_key(crop_name: str) -> str:
	return crop_name.strip().lower()


def calculate_suitability(crop_name: str, soil: SoilData, weather: WeatherObservation | None) -> int:
	"""Score 0-100: base 50 plus pH, organic matter and temperature band bonuses."""
	profile = CROP_PROFILES.get(_crop_key(crop_name), DEFAULT_PROFILE)
	score = BASE_SCORE

	if soil.ph in profile.ph_optimal:
		score += PH_OPTIMAL_BONUS
	elif soil.ph in profile.ph_acceptable:
		score += PH_ACCEPTABLE_BONUS

	if soil.organic_matter >= profile.organic_matter_min:
		score += ORGANIC_MATTER_BONUS

	if weather is not None:
		if weather.temperature in profile.temperature_optimal:
			score += TEMPERATURE_OPTIMAL_BONUS
		elif weather.temperature in profile.temperature_acceptable:
			score += TEMPERATURE_ACCEPTABLE_BONUS

	return max(0, min(100, score))


def create_crop_recommendation(crop_name: str, soil: SoilData, weather: WeatherObservation | None) -> CropRecommendation:
	suitability = calculate_suitability(crop_name, soil, weather)
	info = CROP_CATALOG.get(_crop_key(crop_name))
	if info is None:
		return CropRecommendation(
			name=crop_name,
			variety="Local variety",
			planting_date="Season dependent",
			harvest_date="Season dependent",
			expected_yield="Variable",
			suitability=suitability,
			description="Crop recommendation based on current conditions",
			requirements="Check specific requirements",
			benefits=["Suitable for current conditions"],
			challenges=["Monitor growing conditions"],
		)
	return CropRecommendation(
		name=info.name,
		variety=info.variety,
		planting_date=info.planting_date,
		harvest_date=info.harvest_date,
		expected_yield=info.expected_yield,
		suitability=suitability,
		description=info.description,
		requirements=info.requirements,
		benefits=list(info.benefits),
		challenges=list(info.challenges),
	)


def recommend_crops(
	candidates: Iterable[str],
	soil: SoilData | None,
	weather: WeatherObservation | None,
) -> list[CropRecommendation]:
	"""Rank candidate crops by suitability; empty when soil or weather is missing."""
	if soil is None or weather is None:
		return []
	recommendations = [create_crop_recommendation(name, soil, weather) for name in candidates]
	return sorted(recommendations, key=lambda item: item.suitability, reverse=True)


# ── Irrigation ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class StageIrrigation:
	frequency: str
	duration: str
	amount: str
	priority: IrrigationPriority
	description: str
	tips: tuple[str, ...]


DEFAULT_TIME_OF_DAY = "Early morning (6-8 AM)"

STAGE_IRRIGATION: dict[GrowthStage, StageIrrigation] = {
	GrowthStage.planting: StageIrrigation(
		"Every 2-3 days",
		"20-30 minutes",
		"10-15mm",
		IrrigationPriority.high,
		"Critical for seed germination and early root development",
		("Ensure soil is moist but not waterlogged", "Water gently to avoid washing away seeds"),
	),
	GrowthStage.vegetative: StageIrrigation(
		"Every 3-4 days",
		"30-45 minutes",
		"15-20mm",
		IrrigationPriority.high,
		"Essential for rapid growth and leaf development",
		("Monitor soil moisture regularly", "Water deeply to encourage root growth"),
	),
	GrowthStage.flowering: StageIrrigation(
		"Every 2-3 days",
		"45-60 minutes",
		"20-25mm",
		IrrigationPriority.critical,
		"Most critical stage - water stress can severely reduce yield",
		("Never let soil dry out during flowering", "Consider drip irrigation for efficiency"),
	),
	GrowthStage.fruiting: StageIrrigation(
		"Every 3-4 days",
		"30-45 minutes",
		"15-20mm",
		IrrigationPriority.high,
		"Important for grain filling and kernel development",
		("Reduce frequency as kernels mature", "Stop irrigation 2 weeks before harvest"),
	),
	GrowthStage.maturity: StageIrrigation(
		"Every 5-7 days",
		"20-30 minutes",
		"10-15mm",
		IrrigationPriority.low,
		"Minimal irrigation for natural drying",
		("Reduce irrigation significantly", "Allow natural maturation"),
	),
}


def irrigation_schedule(
	crop: str,
	growth_stage: GrowthStage,
	soil: SoilData,
	weather: WeatherObservation | None,
) -> IrrigationSchedule:
	"""Stage baseline with soil tips appended and frequency overridden at temperature extremes."""
	stage = STAGE_IRRIGATION[growth_stage]
	frequency = stage.frequency
	tips = list(stage.tips)

	if soil.ph < 6.0 or soil.ph > 8.0:
		tips.append("Monitor soil pH and adjust irrigation accordingly")
	if soil.organic_matter < 2.0:
		tips.append("Consider adding organic matter to improve water retention")

	if weather is not None:
		if weather.temperature > 30:
			frequency = "Every 2-3 days"
			tips.append("Increase frequency during hot weather")
		elif weather.temperature < 15:
			frequency = "Every 5-7 days"
			tips.append("Reduce frequency during cool weather")

	return IrrigationSchedule(
		crop=crop,
		growth_stage=growth_stage,
		frequency=frequency,
		duration=stage.duration,
		amount=stage.amount,
		time_of_day=DEFAULT_TIME_OF_DAY,
		priority=stage.priority,
		description=stage.description,
		tips=tips,
	)


def irrigation_schedules(crop: str, soil: SoilData, weather: WeatherObservation | None) -> list[IrrigationSchedule]:
	return [irrigation_schedule(crop, stage, soil, weather) for stage in GrowthStage]
