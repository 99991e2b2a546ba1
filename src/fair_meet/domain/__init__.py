"""Domain layer - core models, ports and errors."""

from fair_meet.domain.errors import (
    CandidateExhaustionError,
    FairMeetError,
    GeocodeError,
    NoMeetingPointsError,
    NoStationFoundError,
    ProviderTimeoutError,
    Side,
    VenueProviderError,
)
from fair_meet.domain.models import (
    Coordinates,
    MeetingPoint,
    RankingOptions,
    RankingResult,
    Station,
)
from fair_meet.domain.ports import GeoProvider, TransitProvider, VenueProvider

__all__ = [
    "CandidateExhaustionError",
    "Coordinates",
    "FairMeetError",
    "GeoProvider",
    "GeocodeError",
    "MeetingPoint",
    "NoMeetingPointsError",
    "NoStationFoundError",
    "ProviderTimeoutError",
    "RankingOptions",
    "RankingResult",
    "Side",
    "Station",
    "TransitProvider",
    "VenueProvider",
    "VenueProviderError",
]
