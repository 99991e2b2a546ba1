"""Cache adapters."""

from fair_meet.adapters.cache.venue_cache import VenueCache

__all__ = ["VenueCache"]
