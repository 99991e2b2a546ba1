"""TfL Unified API adapters."""

from fair_meet.adapters.tfl_api.tfl_transit_provider import TflTransitProvider

__all__ = ["TflTransitProvider"]
