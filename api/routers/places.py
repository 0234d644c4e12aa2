"""Address lookup for the course form."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from api.dependencies import get_geocoder
from models import Location
from places import Geocoder, GeocodingError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/geocode", response_model=Location)
async def geocode(
    q: str = Query(..., min_length=1),
    geocoder: Optional[Geocoder] = Depends(get_geocoder),
):
    if geocoder is None:
        raise HTTPException(503, "Google Maps API key is missing")
    try:
        place = await geocoder.geocode(q)
    except GeocodingError:
        logger.exception("Geocoding failed for %r", q)
        raise HTTPException(502, "Failed to look up location")
    if place is None:
        raise HTTPException(404, "Could not find location. Please try again.")
    return place.to_location()
