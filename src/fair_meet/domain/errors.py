"""Errors surfaced by the ranking core."""

from enum import StrEnum


class Side(StrEnum):
    """Which traveller an error refers to."""

    A = "A"
    B = "B"


class FairMeetError(Exception):
    """Base class for all errors raised by the ranking core."""


class _SidedError(FairMeetError):
    """Error that applies to one or both travellers."""

    _what = "failed"

    def __init__(self, sides: tuple[Side, ...]) -> None:
        self.sides = tuple(sides)
        labels = " and ".join(f"location {side}" for side in self.sides)
        super().__init__(f"{self._what}: {labels}")

    @property
    def side(self) -> Side:
        """First failing side."""
        return self.sides[0]


class GeocodeError(_SidedError):
    """A location could not be resolved to coordinates."""

    _what = "Could not geocode"


class NoStationFoundError(_SidedError):
    """Resolved coordinates have no nearby transit station."""

    _what = "No station found near"


class CandidateExhaustionError(FairMeetError):
    """The candidate station set was empty before evaluation."""

    def __init__(self, message: str = "No candidate stations available, please try again") -> None:
        super().__init__(message)


class NoMeetingPointsError(FairMeetError):
    """Every candidate failed the fairness constraints or its leg lookups."""

    def __init__(self, message: str = "No fair meeting points found") -> None:
        super().__init__(message)


class ProviderTimeoutError(FairMeetError):
    """A single provider call exceeded its time budget."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{operation} timed out after {timeout_seconds}s")


class VenueProviderError(FairMeetError):
    """A venue search failed, as opposed to returning no venues."""
