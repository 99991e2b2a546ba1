"""Ranking options domain model."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RankingOptions:
    """Per-request switches for the ranking engine."""

    include_venues: bool = False
    venue_filters: Mapping[str, bool] = field(default_factory=dict)  # category -> enabled

    def with_defaults(self, categories: Iterable[str]) -> "RankingOptions":
        """Return options with an explicit flag for every configured category.

        Categories not mentioned in ``venue_filters`` are enabled. Filters for
        categories that are not configured are dropped.
        """
        resolved = {
            category: bool(self.venue_filters.get(category, True)) for category in categories
        }
        return RankingOptions(include_venues=self.include_venues, venue_filters=resolved)

    @property
    def enabled_categories(self) -> list[str]:
        """Categories switched on, in configuration order."""
        return [category for category, enabled in self.venue_filters.items() if enabled]
