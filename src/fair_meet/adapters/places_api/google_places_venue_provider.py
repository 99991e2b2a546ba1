"""Google Places venue provider adapter.

API Documentation: https://developers.google.com/maps/documentation/places/web-service/search-nearby
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from fair_meet.adapters.api_request_logger import log_api_request
from fair_meet.domain.errors import ProviderTimeoutError, VenueProviderError
from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.venue import Venue
from fair_meet.domain.ports.venue_provider import VenueProvider

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from fair_meet.adapters.api_rate_limiter import ApiRateLimiter

logger = logging.getLogger(__name__)

GOOGLE_PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 8.0

# Statuses that mean the search itself worked
SUCCESS_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


def parse_place(place: dict[str, Any], category: str) -> Venue | None:
    """Build a Venue from a Places result, or None if it has no location."""
    location = place.get("geometry", {}).get("location", {})
    if location.get("lat") is None or location.get("lng") is None:
        return None
    return Venue(
        id=place.get("place_id", ""),
        name=place.get("name", ""),
        category=category,
        lat=float(location["lat"]),
        lon=float(location["lng"]),
        rating=place.get("rating"),
        price_level=place.get("price_level"),
    )


class GooglePlacesVenueProvider(VenueProvider):
    """Nearby venue search using the Places Nearby Search endpoint.

    The request timeout starts once the rate limiter lets the request through.
    """

    applies_request_timeout = True

    def __init__(
        self,
        session: "ClientSession",
        api_key: str | None,
        base_url: str = GOOGLE_PLACES_API_BASE,
        rate_limiter: "ApiRateLimiter | None" = None,
        request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize with an aiohttp session and API key."""
        self._session = session
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._rate_limiter = rate_limiter
        self._request_timeout_seconds = request_timeout_seconds

    async def search(
        self, coordinates: Coordinates, category: str, radius_meters: int
    ) -> list[Venue]:
        """Search venues of one Places type around a point.

        Raises:
            VenueProviderError: If no API key is set, the request fails or
                Places reports an error status.
            ProviderTimeoutError: If the request outlives its time budget.
        """
        if not self._api_key:
            raise VenueProviderError("GOOGLE_PLACES_API_KEY not set")

        url = f"{self._base_url}/nearbysearch/json"
        params: dict[str, str | int] = {
            "location": f"{coordinates.lat},{coordinates.lon}",
            "radius": radius_meters,
            "type": category,
            "key": self._api_key,
        }

        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()
        log_api_request("GET", url, params=params)
        try:
            async with asyncio.timeout(self._request_timeout_seconds):
                async with self._session.get(url, params=params) as response:
                    if response.status != 200:
                        raise VenueProviderError(
                            f"Places API returned status {response.status} for {category}"
                        )
                    data = await response.json()
        except TimeoutError as e:
            raise ProviderTimeoutError(
                f"Places search {category}", self._request_timeout_seconds
            ) from e
        except aiohttp.ClientError as e:
            raise VenueProviderError(f"Places API request failed for {category}: {e}") from e

        status = data.get("status") if isinstance(data, dict) else None
        if status not in SUCCESS_STATUSES:
            message = data.get("error_message", "") if isinstance(data, dict) else ""
            raise VenueProviderError(f"Places API status {status} for {category}: {message}")

        venues = [parse_place(place, category) for place in data.get("results", [])]
        found = [venue for venue in venues if venue is not None]
        logger.debug(
            f"Found {len(found)} {category} venue(s) near {coordinates.lat}, {coordinates.lon}"
        )
        return found
