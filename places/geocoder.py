"""Address lookup for the course form.

The Google Geocoding REST endpoint turns a typed-in address into the
formatted address and coordinates stored on a course.
"""

import logging
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel

from models import Location

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingError(Exception):
    """The geocoding service failed or refused the request."""


class Place(BaseModel):
    formatted_address: str
    lat: float
    lng: float

    def to_location(self) -> Location:
        return Location(address=self.formatted_address, lat=self.lat, lng=self.lng)


class Geocoder(Protocol):
    """Interface for address lookups. Returns None when nothing matches."""

    async def geocode(self, query: str) -> Optional[Place]:
        ...


class GoogleGeocoder:
    """Geocoder backed by the Google Maps Geocoding API."""

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        if not api_key:
            raise GeocodingError("Google Maps API key is missing")
        self._api_key = api_key
        self._client = client
        self._timeout = timeout

    async def geocode(self, query: str) -> Optional[Place]:
        query = query.strip()
        if not query:
            return None

        params = {"address": query, "key": self._api_key}
        try:
            if self._client is not None:
                response = await self._client.get(GEOCODE_URL, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(GEOCODE_URL, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Geocoding request failed (%s)", exc)
            raise GeocodingError(f"Geocoding request failed: {exc}") from exc

        status = payload.get("status")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            message = payload.get("error_message") or status
            raise GeocodingError(f"Geocoding failed: {message}")

        results = payload.get("results") or []
        if not results:
            return None
        first = results[0]
        loc = first["geometry"]["location"]
        return Place(
            formatted_address=first.get("formatted_address", query),
            lat=loc["lat"],
            lng=loc["lng"],
        )
