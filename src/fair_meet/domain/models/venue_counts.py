"""Venue counts domain model."""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class VenueCounts(BaseModel):
    """Number of venues found near a station, per category."""

    model_config = ConfigDict(frozen=True)

    counts: dict[str, int] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        """Sum over all categories."""
        return sum(self.counts.values())

    def get(self, category: str) -> int:
        """Count for a category, 0 when the category was not looked up."""
        return self.counts.get(category, 0)
