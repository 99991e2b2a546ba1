"""Adapters layer - external system integrations."""

from fair_meet.adapters.cache import VenueCache
from fair_meet.adapters.config import AppConfig
from fair_meet.adapters.places_api import GooglePlacesVenueProvider
from fair_meet.adapters.postcodes_api import PostcodesIoGeoProvider
from fair_meet.adapters.tfl_api import TflTransitProvider

__all__ = [
    "AppConfig",
    "GooglePlacesVenueProvider",
    "PostcodesIoGeoProvider",
    "TflTransitProvider",
    "VenueCache",
]
