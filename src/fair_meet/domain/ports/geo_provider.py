"""Geo provider port."""

from typing import Protocol

from fair_meet.domain.models.coordinates import Coordinates


class GeoProvider(Protocol):
    """Port for resolving free-text locations to coordinates."""

    async def resolve(self, location_text: str) -> Coordinates | None:
        """Resolve a location string, or None if it cannot be found."""
        ...
