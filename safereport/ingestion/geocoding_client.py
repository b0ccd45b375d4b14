"""
SafeReport - Geocoding Client
Resolves addresses to coordinates and coordinates to addresses using the
Google Geocoding API.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from safereport.core.exceptions import GeolocationError

logger = logging.getLogger(__name__)


@dataclass
class GeoLocation:
    """A resolved place."""
    latitude: float
    longitude: float
    formatted_address: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "formatted_address": self.formatted_address,
        }


class GeocodingClient:
    """
    Client for the Google Geocoding API.

    Usage:
        client = GeocodingClient(api_key="your_key")
        place = client.reverse(12.34, 56.78)
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize geocoding client.

        Args:
            api_key: Google Maps API key (calls fail with GeolocationError when missing)
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def reverse(self, latitude: float, longitude: float) -> GeoLocation:
        """
        Find the formatted address for a coordinate pair.

        Raises:
            GeolocationError: lookup failed or found nothing
        """
        result = self._request({"latlng": f"{latitude},{longitude}"})
        # Keep the caller's coordinates; the API returns the matched place's
        return GeoLocation(
            latitude=latitude,
            longitude=longitude,
            formatted_address=result.get("formatted_address", ""),
        )

    def resolve_address(self, address: str) -> GeoLocation:
        """
        Find coordinates for a typed address.

        Raises:
            GeolocationError: lookup failed or found nothing
        """
        if not address or not address.strip():
            raise GeolocationError("Address is empty")

        result = self._request({"address": address.strip()})
        try:
            location = result["geometry"]["location"]
            return GeoLocation(
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
                formatted_address=result.get("formatted_address", address.strip()),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GeolocationError("Geocoding result has no coordinates") from e

    def _request(self, params: Dict[str, str]) -> Dict[str, Any]:
        """Run a geocoding query and return the first result."""
        if not self.is_configured:
            raise GeolocationError("Google Maps API key not configured")

        try:
            response = self._client.get(self.BASE_URL, params={**params, "key": self.api_key})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoding request failed: {e}")
            raise GeolocationError() from e

        status = payload.get("status")
        results = payload.get("results") or []
        if status != "OK" or not results:
            logger.info(f"Geocoding returned status {status}")
            raise GeolocationError(f"No location found ({status})")

        return results[0]
