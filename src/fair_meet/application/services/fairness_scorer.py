"""Fairness scoring of a pair of travel times."""

MAX_SCORE = 100.0
EXCLUDED_SCORE = 0.0

# Hard limits in minutes; anything beyond them is not a reasonable meeting point
MAX_TOTAL_MINUTES = 90.0
MAX_LEG_MINUTES = 60.0

EQUITY_WEIGHT = 50.0
EFFORT_WEIGHT = 50.0


class FairnessScorer:
    """Turns two travel durations into a 0-100 score.

    The equity term penalises the relative gap between the legs, the effort
    term penalises the combined travel time against ``MAX_TOTAL_MINUTES``.
    A score of 0 marks a candidate excluded by the hard limits.
    """

    def __init__(
        self,
        equity_weight: float = EQUITY_WEIGHT,
        effort_weight: float = EFFORT_WEIGHT,
        max_total_minutes: float = MAX_TOTAL_MINUTES,
        max_leg_minutes: float = MAX_LEG_MINUTES,
    ) -> None:
        self.equity_weight = equity_weight
        self.effort_weight = effort_weight
        self.max_total_minutes = max_total_minutes
        self.max_leg_minutes = max_leg_minutes

    def score(self, time_a: float, time_b: float) -> float:
        """Score two leg durations in minutes."""
        if time_a < 0 or time_b < 0:
            raise ValueError(f"Travel times must be non-negative, got {time_a} and {time_b}")

        diff = abs(time_a - time_b)
        max_time = max(time_a, time_b)
        total = time_a + time_b

        if total > self.max_total_minutes or max_time > self.max_leg_minutes:
            return EXCLUDED_SCORE

        # Both travellers are already at the candidate
        if max_time == 0:
            return MAX_SCORE

        equity_penalty = (diff / max_time) * self.equity_weight
        effort_penalty = (total / self.max_total_minutes) * self.effort_weight
        score = MAX_SCORE - (equity_penalty + effort_penalty)
        return max(EXCLUDED_SCORE, min(MAX_SCORE, score))
