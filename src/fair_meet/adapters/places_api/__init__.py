"""Google Places adapters."""

from fair_meet.adapters.places_api.google_places_venue_provider import (
    GooglePlacesVenueProvider,
)

__all__ = ["GooglePlacesVenueProvider"]
