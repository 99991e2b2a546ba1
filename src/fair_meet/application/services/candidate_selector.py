"""Selection of candidate meeting stations."""

import logging
from collections.abc import Iterable

from fair_meet.domain.models.station import Station

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 20


class CandidateSelector:
    """Narrows the full station list to a bounded, ordered evaluation set.

    Each candidate costs two journey lookups, so the cap bounds the fan-out of
    a single ranking request. Stations are preferred when their name contains
    one of ``interchange_names`` or when they serve one of
    ``interchange_modes``. With no allow-list at all, the first stations are
    taken as-is.
    """

    def __init__(
        self,
        interchange_names: Iterable[str] = (),
        interchange_modes: Iterable[str] = (),
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
    ) -> None:
        if max_candidates < 1:
            raise ValueError("max_candidates must be at least 1")
        self._names = [name.casefold() for name in interchange_names if name.strip()]
        self._modes = {mode.casefold() for mode in interchange_modes if mode.strip()}
        self.max_candidates = max_candidates

    def _is_interchange(self, station: Station) -> bool:
        if not self._names and not self._modes:
            return True
        name = station.name.casefold()
        if any(pattern in name for pattern in self._names):
            return True
        return any(mode.casefold() in self._modes for mode in station.modes)

    def select(self, all_stations: Iterable[Station]) -> list[Station]:
        """Return at most ``max_candidates`` stations, keeping input order."""
        selected: list[Station] = []
        seen_ids: set[str] = set()
        for station in all_stations:
            if station.id in seen_ids or not self._is_interchange(station):
                continue
            seen_ids.add(station.id)
            selected.append(station)
            if len(selected) >= self.max_candidates:
                break

        logger.debug(f"Selected {len(selected)} candidate station(s)")
        return selected
