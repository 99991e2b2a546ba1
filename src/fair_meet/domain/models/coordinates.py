"""Coordinates domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point in decimal degrees."""

    lat: float
    lon: float
