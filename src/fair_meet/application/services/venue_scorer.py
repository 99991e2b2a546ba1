"""Venue density scoring."""

from collections.abc import Mapping

from fair_meet.domain.models.venue_counts import VenueCounts

VENUE_SCORE_DIVISOR = 10.0


class VenueScorer:
    """Scores venue counts; unbounded above, 0 when nothing was found.

    Category weights come from ``[venues] weights`` in the TOML config. Without
    any, every venue counts once.
    """

    def __init__(self, category_weights: Mapping[str, float] | None = None) -> None:
        # Categories without an explicit weight count once
        self._category_weights = dict(category_weights or {})

    def score(self, counts: VenueCounts) -> float:
        """Weighted venue total divided by ``VENUE_SCORE_DIVISOR``."""
        if not self._category_weights:
            return counts.total / VENUE_SCORE_DIVISOR
        weighted = sum(
            count * self._category_weights.get(category, 1.0)
            for category, count in counts.counts.items()
        )
        return weighted / VENUE_SCORE_DIVISOR
