"""Meeting point domain model."""

from pydantic import BaseModel, Field, computed_field

from fair_meet.domain.models.station import Station
from fair_meet.domain.models.venue_counts import VenueCounts


class MeetingPoint(BaseModel):
    """A candidate station scored for two travellers.

    Built per request: travel times first, then the fairness score, then
    (for the top candidates only) venue counts and the blended final score.
    """

    station: Station
    time_from_a: float
    time_from_b: float
    fairness_score: float = Field(default=0.0, ge=0.0, le=100.0)
    venue_counts: VenueCounts | None = None
    venue_score: float | None = None
    final_score: float | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def time_difference(self) -> float:
        """Absolute gap between the two legs in minutes."""
        return abs(self.time_from_a - self.time_from_b)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_time(self) -> float:
        """Combined travel time of both legs in minutes."""
        return self.time_from_a + self.time_from_b

    @property
    def ranking_score(self) -> float:
        """Final score when venue scoring ran, fairness score otherwise."""
        if self.final_score is not None:
            return self.final_score
        return self.fairness_score
