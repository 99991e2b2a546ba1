"""Ports (interfaces) for the ports-and-adapters architecture."""

from fair_meet.domain.ports.geo_provider import GeoProvider
from fair_meet.domain.ports.transit_provider import TransitProvider
from fair_meet.domain.ports.venue_provider import VenueProvider

__all__ = [
    "GeoProvider",
    "TransitProvider",
    "VenueProvider",
]
