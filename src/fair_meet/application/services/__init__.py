"""Application services (use cases) for meeting point ranking."""

from fair_meet.application.services.candidate_selector import CandidateSelector
from fair_meet.application.services.fairness_scorer import FairnessScorer
from fair_meet.application.services.ranking_engine import RankingEngine, blend_scores
from fair_meet.application.services.venue_scorer import VenueScorer

__all__ = [
    "CandidateSelector",
    "FairnessScorer",
    "RankingEngine",
    "VenueScorer",
    "blend_scores",
]
