"""Crop insight, suitability and weather analysis routes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from agroclimate.errors import DataUnavailableError
from agroclimate.schemas.insights import (
	InsightMap,
	InsightRequest,
	SuitabilityRequest,
	SuitabilityResponse,
	WeatherAnalysis,
	WeatherAnalysisRequest,
)
from agroclimate.services.insight_service import InsightService

router = APIRouter(prefix="/insights", tags=["insights"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, DataUnavailableError):
		return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="insight failure")


# Registered before the ``/{location}`` routes so "suitability" is never read as a location.
@router.post("/suitability", response_model=SuitabilityResponse)
async def calculate_suitability(payload: SuitabilityRequest, request: Request) -> SuitabilityResponse:
	service = InsightService(getattr(request.app.state, "redis", None))
	try:
		return service.calculate_suitability(payload.crop, payload.soil_data, payload.weather)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/{location}", response_model=InsightMap)
async def get_ai_insights(location: str, payload: InsightRequest, request: Request) -> InsightMap:
	service = InsightService(getattr(request.app.state, "redis", None))
	try:
		return await service.get_ai_insights(
			location,
			payload.current_weather,
			payload.soil_data,
			crop=payload.crop,
			growth_stage=payload.growth_stage,
			candidate_crops=payload.candidate_crops,
		)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/{location}/weather-analysis", response_model=WeatherAnalysis)
async def get_ai_weather_analysis(location: str, payload: WeatherAnalysisRequest, request: Request) -> WeatherAnalysis:
	service = InsightService(getattr(request.app.state, "redis", None))
	try:
		return await service.get_ai_weather_analysis(location, payload.historical_data, payload.days_ahead)
	except Exception as exc:
		raise _map_error(exc) from exc
