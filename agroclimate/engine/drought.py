"""Drought risk scoring over a monthly forecast sequence."""

from __future__ import annotations

import math
from collections.abc import Sequence

from agroclimate.errors import InvalidParameterError
from agroclimate.models.enums import RiskLevel
from agroclimate.schemas.forecast import DroughtRiskAssessment, MonthlyPrediction

DEFICIT_WEIGHT = 0.7
HEAT_WEIGHT = 0.3
# A 50% rainfall shortfall or a +3°C mean excess saturates its component score.
DEFICIT_SATURATION = 0.5
HEAT_SATURATION = 3.0
# Bucket edges: [0, 0.4) low, [0.4, 0.6] medium, (0.6, 1] high.
LOW_UPPER = 0.4
HIGH_LOWER = 0.6
FACTOR_THRESHOLD = 0.4

RAINFALL_DEFICIT = "rainfall_deficit"
HEAT_STRESS = "heat_stress"

LEVEL_RECOMMENDATIONS: dict[RiskLevel, tuple[str, ...]] = {
	RiskLevel.high: (
		"High drought risk - implement emergency water conservation",
		"Focus on drought-tolerant crops only",
		"Prepare alternative water sources",
		"Reduce planting area to conserve water",
	),
	RiskLevel.medium: (
		"Moderate drought risk - prepare water conservation measures",
		"Plant drought-resistant crop varieties",
		"Implement efficient irrigation systems",
		"Monitor soil moisture regularly",
	),
	RiskLevel.low: (
		"Low drought risk - normal farming practices",
		"Maintain regular irrigation schedule",
		"Monitor weather conditions",
	),
}

FACTOR_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
	RAINFALL_DEFICIT: (
		"Harvest and store rainwater during wet spells",
		"Switch to short-season, drought-tolerant varieties",
		"Apply mulch to reduce soil moisture loss",
	),
	HEAT_STRESS: (
		"Irrigate early morning or evening to limit evaporation",
		"Provide shade for nurseries and heat-sensitive crops",
		"Check crops for wilting and leaf curling during hot spells",
	),
}


def classify_risk(overall_risk: float) -> RiskLevel:
	if math.isnan(overall_risk) or not 0.0 <= overall_risk <= 1.0:
		raise InvalidParameterError(f"overall risk must be within [0, 1], got {overall_risk}")
	if overall_risk < LOW_UPPER:
		return RiskLevel.low
	if overall_risk <= HIGH_LOWER:
		return RiskLevel.medium
	return RiskLevel.high


def compute_drought_risk(monthly_predictions: Sequence[MonthlyPrediction]) -> DroughtRiskAssessment:
	"""Score drought risk from rainfall deficit and temperature excess against climatology."""
	if not monthly_predictions:
		raise InvalidParameterError("drought risk needs at least one monthly prediction")

	forecast_rain = sum(item.rainfall.total for item in monthly_predictions)
	normal_rain = sum(item.climatology.rainfall for item in monthly_predictions)
	rainfall_deficit = max(0.0, 1.0 - forecast_rain / normal_rain) if normal_rain > 0 else 0.0

	excesses = [max(0.0, item.temperature.average - item.climatology.temperature) for item in monthly_predictions]
	temperature_excess = sum(excesses) / len(excesses)

	deficit_score = min(1.0, rainfall_deficit / DEFICIT_SATURATION)
	heat_score = min(1.0, temperature_excess / HEAT_SATURATION)
	overall_risk = round(min(1.0, max(0.0, DEFICIT_WEIGHT * deficit_score + HEAT_WEIGHT * heat_score)), 4)
	level = classify_risk(overall_risk)

	factors: list[str] = []
	if deficit_score >= FACTOR_THRESHOLD:
		factors.append(RAINFALL_DEFICIT)
	if heat_score >= FACTOR_THRESHOLD:
		factors.append(HEAT_STRESS)

	recommendations = list(LEVEL_RECOMMENDATIONS[level])
	for factor in factors:
		recommendations.extend(FACTOR_RECOMMENDATIONS[factor])

	return DroughtRiskAssessment(
		risk_level=level,
		overall_risk=overall_risk,
		rainfall_deficit=round(min(1.0, rainfall_deficit), 4),
		temperature_excess=round(temperature_excess, 4),
		triggering_factors=factors,
		recommendations=recommendations,
	)
