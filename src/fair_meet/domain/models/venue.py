"""Venue domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Venue:
    """A point of interest returned by a venue search."""

    id: str
    name: str
    category: str
    lat: float
    lon: float
    rating: float | None = None
    price_level: int | None = None
