"""
Geocoding Service

Resolves a free-form address or zipcode into coordinates and address parts
through a MapQuest compatible HTTP API.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from ..config import Settings

logger = logging.getLogger("uvicorn.error")


@dataclass
class GeoResult:
    """One geocoded location"""
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state_code: Optional[str] = None
    zipcode: Optional[str] = None
    country_code: Optional[str] = None


def _format_address(loc: dict) -> str:
    state_zip = " ".join(p for p in (loc.get("adminArea3"), loc.get("postalCode")) if p)
    parts = [loc.get("street"), loc.get("adminArea5"), state_zip, loc.get("adminArea1")]
    return ", ".join(p for p in parts if p)


def parse_mapquest_response(payload: dict) -> List[GeoResult]:
    """
    Convert a MapQuest /geocoding/v1/address response into GeoResult items.

    Shape: {"results": [{"locations": [{"latLng": {"lat", "lng"}, "street",
             "adminArea5" (city), "adminArea3" (state), "postalCode",
             "adminArea1" (country)}]}]}
    """
    results = []
    for block in payload.get("results", []):
        for loc in block.get("locations", []):
            lat_lng = loc.get("latLng") or {}
            if "lat" not in lat_lng or "lng" not in lat_lng:
                continue
            results.append(GeoResult(
                latitude=float(lat_lng["lat"]),
                longitude=float(lat_lng["lng"]),
                formatted_address=_format_address(loc) or None,
                street=loc.get("street") or None,
                city=loc.get("adminArea5") or None,
                state_code=loc.get("adminArea3") or None,
                zipcode=loc.get("postalCode") or None,
                country_code=loc.get("adminArea1") or None,
            ))
    return results


class GeocodingService:
    """Address → coordinates lookups"""

    def __init__(self, settings: Settings, timeout: float = 10.0):
        self.api_key = settings.geocoder_api_key
        self.api_url = settings.geocoder_url
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def geocode(self, address: str) -> List[GeoResult]:
        """
        Geocode an address.

        Returns:
            Matching locations, best match first (may be empty)

        Raises:
            RuntimeError: if no API key is configured
            httpx.HTTPError: on transport or HTTP status errors
        """
        if not self.is_available():
            raise RuntimeError("GEOCODER_API_KEY is missing")

        params = {"key": self.api_key, "location": address, "maxResults": 1}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.api_url, params=params)
            resp.raise_for_status()
            payload = resp.json()

        results = parse_mapquest_response(payload)
        logger.info("[geocoder] %r -> %d result(s)", address, len(results))
        return results
