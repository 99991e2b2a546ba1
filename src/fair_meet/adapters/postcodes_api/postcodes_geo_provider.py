"""postcodes.io geo provider adapter."""

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import quote

import aiohttp

from fair_meet.adapters.api_request_logger import log_api_request
from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.ports.geo_provider import GeoProvider

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

POSTCODES_API_BASE = "https://api.postcodes.io"


def normalize_postcode(location_text: str) -> str:
    """Strip whitespace and upper-case a UK postcode."""
    return re.sub(r"\s+", "", location_text).upper()


class PostcodesIoGeoProvider(GeoProvider):
    """Resolves UK postcodes to coordinates using postcodes.io (no auth required)."""

    def __init__(self, session: "ClientSession", base_url: str = POSTCODES_API_BASE) -> None:
        """Initialize with an aiohttp session."""
        self._session = session
        self._base_url = base_url.rstrip("/")

    async def resolve(self, location_text: str) -> Coordinates | None:
        """Resolve a postcode, or None if postcodes.io does not know it."""
        postcode = normalize_postcode(location_text)
        if not postcode:
            return None

        url = f"{self._base_url}/postcodes/{quote(postcode)}"
        log_api_request("GET", url)
        try:
            async with self._session.get(url) as response:
                if response.status != 200:
                    logger.info(f"postcodes.io returned status {response.status} for {postcode}")
                    return None
                data = await response.json()
        except aiohttp.ClientError as e:
            logger.warning(f"Error geocoding postcode {postcode}: {e}")
            return None

        result = data.get("result") if isinstance(data, dict) else None
        if not result or result.get("latitude") is None or result.get("longitude") is None:
            return None

        coordinates = Coordinates(lat=float(result["latitude"]), lon=float(result["longitude"]))
        logger.debug(f"Geocoded {postcode} to {coordinates.lat}, {coordinates.lon}")
        return coordinates
