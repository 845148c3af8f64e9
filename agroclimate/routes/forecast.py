"""Seasonal and long-term forecast routes."""

from __future__ import annotations

from datetime import UTC, date, datetime

from fastapi import APIRouter, HTTPException, Query, Request, status

from agroclimate.errors import DataUnavailableError
from agroclimate.schemas.forecast import PredictionBundle
from agroclimate.schemas.prediction import AgroClimaticPrediction
from agroclimate.services.forecast_service import ForecastService
from agroclimate.services.prediction_service import PredictionService

router = APIRouter(prefix="/forecast", tags=["forecast"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, DataUnavailableError):
		return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="forecast failure")


@router.get("/{location}/seasonal", response_model=PredictionBundle)
async def get_seasonal_prediction(
	location: str,
	request: Request,
	months: int = Query(default=6),
	climate_zone: str | None = Query(default=None),
	enso_status: str = Query(default="neutral"),
	reference_date: date | None = Query(default=None),
	use_recent_observations: bool = Query(default=True),
) -> PredictionBundle:
	service = ForecastService(getattr(request.app.state, "redis", None))
	try:
		return await service.generate_seasonal_prediction(
			location,
			climate_zone=climate_zone,
			prediction_months=months,
			enso_status=enso_status,
			reference_date=reference_date,
			use_recent_observations=use_recent_observations,
		)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{location}/long-term", response_model=AgroClimaticPrediction)
async def get_long_term_prediction(
	location: str,
	request: Request,
	days_ahead: int = Query(default=30),
	start_date: date | None = Query(default=None),
) -> AgroClimaticPrediction:
	service = PredictionService(getattr(request.app.state, "redis", None))
	try:
		return await service.generate_long_term_prediction(
			location,
			start_date or datetime.now(UTC).date(),
			days_ahead,
		)
	except Exception as exc:
		raise _map_error(exc) from exc
