"""Journey leg domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class JourneyLeg:
    """One-directional travel time between two stations."""

    from_station_id: str
    to_station_id: str
    duration_minutes: float
