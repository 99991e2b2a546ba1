"""Ranking result domain models."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from fair_meet.domain.errors import NoMeetingPointsError
from fair_meet.domain.models.coordinates import Coordinates
from fair_meet.domain.models.meeting_point import MeetingPoint
from fair_meet.domain.models.station import Station


class ResolvedLocation(BaseModel):
    """What one traveller typed and what it resolved to."""

    input: str
    coordinates: Coordinates
    nearest_station: Station


class RankingResult(BaseModel):
    """Ordered recommendations plus the resolved metadata for both travellers."""

    location_a: ResolvedLocation
    location_b: ResolvedLocation
    recommendations: list[MeetingPoint] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def raise_if_empty(self) -> "RankingResult":
        """Raise NoMeetingPointsError when nothing survived scoring."""
        if not self.recommendations:
            raise NoMeetingPointsError()
        return self
