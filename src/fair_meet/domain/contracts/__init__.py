"""Contracts (protocols) shared between the application and adapter layers."""

from fair_meet.domain.contracts.venue_cache import VenueCacheProtocol

__all__ = ["VenueCacheProtocol"]
