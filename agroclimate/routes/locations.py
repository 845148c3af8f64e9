"""Known location registry routes."""

from __future__ import annotations

from fastapi import APIRouter

from agroclimate.engine.climatology import LOCATIONS
from agroclimate.schemas.locations import LocationInfo, LocationsResponse

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("", response_model=LocationsResponse)
async def list_locations() -> LocationsResponse:
	return LocationsResponse(
		items=[
			LocationInfo(
				name=place.name,
				latitude=place.latitude,
				longitude=place.longitude,
				climate_zone=place.zone,
			)
			for place in sorted(LOCATIONS.values(), key=lambda item: item.name)
		]
	)
