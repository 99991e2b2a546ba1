"""Domain models for fair meeting point ranking."""

from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.journey_leg import JourneyLeg
from fair_meet.domain.models.meeting_point import MeetingPoint
from fair_meet.domain.models.ranking_options import RankingOptions
from fair_meet.domain.models.ranking_result import RankingResult, ResolvedLocation
from fair_meet.domain.models.station import Station
from fair_meet.domain.models.venue import Venue
from fair_meet.domain.models.venue_counts import VenueCounts

__all__ = [
    "Coordinates",
    "JourneyLeg",
    "MeetingPoint",
    "RankingOptions",
    "RankingResult",
    "ResolvedLocation",
    "Station",
    "Venue",
    "VenueCounts",
]
