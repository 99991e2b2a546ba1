"""TfL Unified API transit provider adapter.

API Documentation: https://api.tfl.gov.uk
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiohttp

from fair_meet.adapters.api_request_logger import log_api_request
from fair_meet.domain.errors import ProviderTimeoutError
from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.journey_leg import JourneyLeg
from fair_meet.domain.models.station import Station
from fair_meet.domain.ports.transit_provider import TransitProvider

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from fair_meet.adapters.api_rate_limiter import ApiRateLimiter

logger = logging.getLogger(__name__)

TFL_API_BASE = "https://api.tfl.gov.uk"
DEFAULT_MODES = ("tube", "elizabeth-line")
STATION_STOP_TYPES = "NaptanMetroStation,NaptanRailStation"
DEFAULT_NEAREST_RADIUS_METERS = 2000
DEFAULT_REQUEST_TIMEOUT_SECONDS = 8.0


def parse_stop_point(stop: dict[str, Any]) -> Station | None:
    """Build a Station from a TfL StopPoint, or None if it is incomplete."""
    station_id = stop.get("id") or stop.get("naptanId")
    lat = stop.get("lat")
    lon = stop.get("lon")
    if not station_id or lat is None or lon is None:
        return None
    return Station(
        id=str(station_id),
        name=stop.get("commonName") or str(station_id),
        lat=float(lat),
        lon=float(lon),
        modes=frozenset(stop.get("modes") or []),
    )


class TflTransitProvider(TransitProvider):
    """Station lookup and journey times from Transport for London.

    Each request is bounded by ``request_timeout_seconds`` from the moment the
    rate limiter lets it through, so queueing during a fan-out never counts
    against it.
    """

    applies_request_timeout = True

    def __init__(
        self,
        session: "ClientSession",
        base_url: str = TFL_API_BASE,
        modes: tuple[str, ...] | list[str] = DEFAULT_MODES,
        app_key: str | None = None,
        nearest_radius_meters: int = DEFAULT_NEAREST_RADIUS_METERS,
        rate_limiter: "ApiRateLimiter | None" = None,
        request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize with an aiohttp session and TfL query settings."""
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._modes = ",".join(modes)
        self._app_key = app_key
        self._nearest_radius_meters = nearest_radius_meters
        self._rate_limiter = rate_limiter
        self._request_timeout_seconds = request_timeout_seconds

    def _params(self, **params: str | int | float) -> dict[str, str | int | float]:
        if self._app_key:
            params["app_key"] = self._app_key
        return params

    async def _get_json(self, url: str, params: dict[str, str | int | float]) -> Any | None:
        """GET a TfL endpoint; None on transport errors and non-200 responses.

        Raises:
            ProviderTimeoutError: If the request itself outlives its time budget.
        """
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()
        log_api_request("GET", url, params=params)
        try:
            async with asyncio.timeout(self._request_timeout_seconds):
                async with self._session.get(url, params=params) as response:
                    if response.status != 200:
                        response_text = await response.text()
                        logger.warning(
                            f"TfL API returned status {response.status}: {response_text[:200]}"
                        )
                        return None
                    return await response.json()
        except TimeoutError as e:
            raise ProviderTimeoutError(f"TfL GET {url}", self._request_timeout_seconds) from e
        except aiohttp.ClientError as e:
            logger.warning(f"Error calling TfL API {url}: {e}")
            return None

    async def nearest_station(self, coordinates: Coordinates) -> Station | None:
        """Find the nearest station within the configured radius."""
        data = await self._get_json(
            f"{self._base_url}/StopPoint",
            self._params(
                lat=coordinates.lat,
                lon=coordinates.lon,
                stopTypes=STATION_STOP_TYPES,
                radius=self._nearest_radius_meters,
                modes=self._modes,
            ),
        )
        stop_points = data.get("stopPoints") if isinstance(data, dict) else None
        for stop in stop_points or []:
            station = parse_stop_point(stop)
            if station is not None:
                logger.debug(
                    f"Nearest station to {coordinates.lat}, {coordinates.lon}: {station.name}"
                )
                return station

        logger.warning(
            f"No stations within {self._nearest_radius_meters}m of "
            f"{coordinates.lat}, {coordinates.lon}"
        )
        return None

    async def all_stations(self) -> list[Station]:
        """List all stations served by the configured modes."""
        data = await self._get_json(
            f"{self._base_url}/StopPoint/Mode/{quote(self._modes, safe=',')}", self._params()
        )
        stop_points = data.get("stopPoints") if isinstance(data, dict) else None
        stations = [parse_stop_point(stop) for stop in stop_points or []]
        return [station for station in stations if station is not None]

    async def journey_time(self, from_station_id: str, to_station_id: str) -> JourneyLeg | None:
        """Duration of the first (fastest) journey TfL suggests."""
        url = (
            f"{self._base_url}/Journey/JourneyResults/"
            f"{quote(from_station_id, safe='')}/to/{quote(to_station_id, safe='')}"
        )
        data = await self._get_json(url, self._params(mode=self._modes))
        journeys = data.get("journeys") if isinstance(data, dict) else None
        if not journeys:
            return None

        duration = journeys[0].get("duration")
        if duration is None:
            return None
        return JourneyLeg(
            from_station_id=from_station_id,
            to_station_id=to_station_id,
            duration_minutes=float(duration),
        )
