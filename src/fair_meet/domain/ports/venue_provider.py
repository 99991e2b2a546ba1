"""Venue provider port."""

from typing import Protocol

from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.venue import Venue


class VenueProvider(Protocol):
    """Port for nearby point-of-interest searches.

    An empty list means the search succeeded and found nothing. Hard failures
    raise ``VenueProviderError`` so that callers never mistake them for
    "zero venues".

    Rate-limited implementations set ``applies_request_timeout = True`` as
    described on ``TransitProvider``.
    """

    async def search(
        self, coordinates: Coordinates, category: str, radius_meters: int
    ) -> list[Venue]:
        """Search for venues of one category around a point."""
        ...
