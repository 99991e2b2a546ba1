"""Station domain model."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Station:
    """Represents a public transport station."""

    id: str
    name: str
    lat: float
    lon: float
    modes: frozenset[str] = field(default_factory=frozenset)  # e.g. {"tube", "elizabeth-line"}
