"""Transit provider port."""

from typing import Protocol

from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.journey_leg import JourneyLeg
from fair_meet.domain.models.station import Station


class TransitProvider(Protocol):
    """Port for station lookup and journey planning.

    Implementations that queue behind a rate limiter set
    ``applies_request_timeout = True`` and bound each request themselves once
    it is allowed to start. Callers then leave the time spent queueing untimed.
    """

    async def nearest_station(self, coordinates: Coordinates) -> Station | None:
        """Find the station closest to the given coordinates."""
        ...

    async def all_stations(self) -> list[Station]:
        """List every station the provider knows about."""
        ...

    async def journey_time(self, from_station_id: str, to_station_id: str) -> JourneyLeg | None:
        """Fastest journey between two stations, or None if no route was found."""
        ...
