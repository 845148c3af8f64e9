"""Historical seasonal pattern routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Request, status

from agroclimate.errors import DataUnavailableError
from agroclimate.schemas.patterns import PatternAnalysisResponse
from agroclimate.services.pattern_service import PatternService

router = APIRouter(prefix="/patterns", tags=["patterns"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, DataUnavailableError):
		return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="pattern analysis failure")


@router.get("/{location}", response_model=PatternAnalysisResponse)
async def analyze_sequential_patterns(
	location: str,
	request: Request,
	start_date: date = Query(...),
	end_date: date = Query(...),
) -> PatternAnalysisResponse:
	service = PatternService(getattr(request.app.state, "redis", None))
	try:
		return await service.analyze_sequential_patterns(location, start_date, end_date)
	except Exception as exc:
		raise _map_error(exc) from exc
