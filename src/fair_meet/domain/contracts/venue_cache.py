"""Protocol for venue caching."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from fair_meet.domain.models.coordinates import Coordinates
    from fair_meet.domain.models.venue import Venue


class VenueCacheProtocol(Protocol):
    """Protocol for a time-bounded cache in front of a venue provider.

    A cache whose provider bounds its own requests exposes
    ``applies_request_timeout = True``, as described on ``TransitProvider``.
    """

    async def get_venues(self, coordinates: "Coordinates", category: str) -> list["Venue"]:
        """Get venues for a point and category, fetching on a miss.

        Args:
            coordinates: Where to search. Nearby points may share an entry.
            category: Venue category to search for.

        Returns:
            The cached or freshly fetched venues.

        Raises:
            VenueProviderError: If the upstream search failed. Nothing is cached.
        """
        ...
