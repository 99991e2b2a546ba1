"""Ranking of fair meeting points between two travellers."""

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import TYPE_CHECKING, TypeVar

from fair_meet.application.services.candidate_selector import CandidateSelector
from fair_meet.application.services.fairness_scorer import FairnessScorer
from fair_meet.application.services.venue_scorer import VenueScorer
from fair_meet.domain.errors import (
    CandidateExhaustionError,
    GeocodeError,
    NoStationFoundError,
    ProviderTimeoutError,
    Side,
)
from fair_meet.domain.models import (
    Coordinates,
    MeetingPoint,
    RankingOptions,
    RankingResult,
    ResolvedLocation,
    Station,
    VenueCounts,
)

if TYPE_CHECKING:
    from fair_meet.domain.contracts import VenueCacheProtocol
    from fair_meet.domain.ports import GeoProvider, TransitProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TOP_N = 3
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 8.0
DEFAULT_VENUE_CATEGORIES = ("cafe", "bar", "restaurant")

FAIRNESS_BLEND_WEIGHT = 0.7
VENUE_BLEND_WEIGHT = 0.3


def _times_own_requests(port: object) -> bool:
    return bool(getattr(port, "applies_request_timeout", False))


def blend_scores(fairness_score: float, venue_score: float) -> float:
    """Final score used to re-rank the top candidates. Not clamped."""
    return fairness_score * FAIRNESS_BLEND_WEIGHT + venue_score * VENUE_BLEND_WEIGHT


class RankingEngine:
    """Finds the fairest meeting stations for two locations.

    Every provider call runs under its own timeout. Ports that queue behind a
    rate limiter time their requests themselves, so waiting for a slot never
    counts. A failed or timed-out journey lookup only drops the affected
    candidate; the request as a whole fails only when a traveller cannot be
    located or there is nothing to evaluate.
    """

    def __init__(
        self,
        geo_provider: "GeoProvider",
        transit_provider: "TransitProvider",
        candidate_selector: CandidateSelector | None = None,
        venue_cache: "VenueCacheProtocol | None" = None,
        venue_categories: Iterable[str] = DEFAULT_VENUE_CATEGORIES,
        fairness_scorer: FairnessScorer | None = None,
        venue_scorer: VenueScorer | None = None,
        top_n: int = DEFAULT_TOP_N,
        provider_timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the engine with its providers and scoring components.

        Args:
            geo_provider: Resolves location text to coordinates.
            transit_provider: Station lookup and journey times.
            candidate_selector: Bounds the stations that get evaluated.
            venue_cache: Shared venue cache; venue scoring is skipped without one.
            venue_categories: Categories looked up when venues are requested.
            fairness_scorer: Scores a pair of leg durations.
            venue_scorer: Scores venue counts.
            top_n: How many recommendations to return.
            provider_timeout_seconds: Time budget for each provider call.
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        if provider_timeout_seconds <= 0:
            raise ValueError("provider_timeout_seconds must be positive")
        self._geo = geo_provider
        self._transit = transit_provider
        self._selector = candidate_selector or CandidateSelector()
        self._venue_cache = venue_cache
        self._venue_categories = tuple(venue_categories)
        self._fairness = fairness_scorer or FairnessScorer()
        self._venue_scorer = venue_scorer or VenueScorer()
        self.top_n = top_n
        self.provider_timeout_seconds = provider_timeout_seconds
        self._geo_timed = not _times_own_requests(geo_provider)
        self._transit_timed = not _times_own_requests(transit_provider)
        self._venues_timed = not _times_own_requests(venue_cache)

    async def rank(
        self,
        location_a: str,
        location_b: str,
        options: RankingOptions | None = None,
    ) -> RankingResult:
        """Rank meeting points for two locations.

        Raises:
            GeocodeError: A location could not be resolved.
            NoStationFoundError: A location has no nearby station.
            CandidateExhaustionError: There were no candidate stations to evaluate.
        """
        options = (options or RankingOptions()).with_defaults(self._venue_categories)

        coords_a, coords_b = await self._resolve_both(location_a, location_b)
        station_a, station_b = await self._nearest_stations(coords_a, coords_b)
        logger.info(f"Nearest stations: {station_a.name} / {station_b.name}")

        candidates = await self._candidates()
        logger.info(f"Evaluating {len(candidates)} candidate station(s)")

        evaluated = await asyncio.gather(
            *(self._evaluate(candidate, station_a, station_b) for candidate in candidates)
        )
        meeting_points = [point for point in evaluated if point is not None]
        logger.info(f"Found {len(meeting_points)} valid meeting point(s)")

        top_points = self._top(meeting_points)

        if options.include_venues and top_points:
            if self._venue_cache is None:
                logger.warning("Venue scoring requested but no venue cache is configured")
            else:
                await asyncio.gather(
                    *(
                        self._score_venues(self._venue_cache, point, options)
                        for point in top_points
                    )
                )
                top_points = self._top(top_points)

        return RankingResult(
            location_a=ResolvedLocation(
                input=location_a, coordinates=coords_a, nearest_station=station_a
            ),
            location_b=ResolvedLocation(
                input=location_b, coordinates=coords_b, nearest_station=station_b
            ),
            recommendations=top_points,
        )

    async def _call(
        self, operation: str, awaitable: Awaitable[T], timed: bool = True
    ) -> T | None:
        """Await a provider call, under the timeout when ``timed``; None when it fails."""
        try:
            if not timed:
                return await awaitable
            try:
                return await asyncio.wait_for(awaitable, timeout=self.provider_timeout_seconds)
            except TimeoutError as e:
                raise ProviderTimeoutError(operation, self.provider_timeout_seconds) from e
        except ProviderTimeoutError as e:
            logger.warning(str(e))
        except Exception as e:
            logger.warning(f"{operation} failed: {type(e).__name__}: {e}")
        return None

    async def _resolve_both(
        self, location_a: str, location_b: str
    ) -> tuple[Coordinates, Coordinates]:
        coords_a, coords_b = await asyncio.gather(
            self._call(
                f"geocode {location_a!r}", self._geo.resolve(location_a), self._geo_timed
            ),
            self._call(
                f"geocode {location_b!r}", self._geo.resolve(location_b), self._geo_timed
            ),
        )
        if coords_a is None or coords_b is None:
            failed = tuple(
                side for side, coords in ((Side.A, coords_a), (Side.B, coords_b)) if coords is None
            )
            logger.info(f"Geocoding failed for {', '.join(failed)}")
            raise GeocodeError(failed)
        return coords_a, coords_b

    async def _nearest_stations(
        self, coords_a: Coordinates, coords_b: Coordinates
    ) -> tuple[Station, Station]:
        station_a, station_b = await asyncio.gather(
            self._call(
                "nearest station A",
                self._transit.nearest_station(coords_a),
                self._transit_timed,
            ),
            self._call(
                "nearest station B",
                self._transit.nearest_station(coords_b),
                self._transit_timed,
            ),
        )
        if station_a is None or station_b is None:
            failed = tuple(
                side
                for side, station in ((Side.A, station_a), (Side.B, station_b))
                if station is None
            )
            raise NoStationFoundError(failed)
        return station_a, station_b

    async def _candidates(self) -> list[Station]:
        all_stations = (
            await self._call("list stations", self._transit.all_stations(), self._transit_timed)
            or []
        )
        candidates = self._selector.select(all_stations)
        if not candidates:
            logger.error(
                f"No candidate stations out of {len(all_stations)} listed; "
                "check the interchange allow-list"
            )
            raise CandidateExhaustionError()
        return candidates

    async def _leg_minutes(self, origin: Station, candidate: Station) -> float | None:
        if origin.id == candidate.id:
            return 0.0
        leg = await self._call(
            f"journey {origin.id} -> {candidate.id}",
            self._transit.journey_time(origin.id, candidate.id),
            self._transit_timed,
        )
        if leg is None or leg.duration_minutes < 0:
            return None
        return leg.duration_minutes

    async def _evaluate(
        self, candidate: Station, station_a: Station, station_b: Station
    ) -> MeetingPoint | None:
        time_a, time_b = await asyncio.gather(
            self._leg_minutes(station_a, candidate),
            self._leg_minutes(station_b, candidate),
        )
        if time_a is None or time_b is None:
            logger.debug(f"Skipping {candidate.name}: missing journey time")
            return None

        fairness_score = self._fairness.score(time_a, time_b)
        if fairness_score <= 0:
            logger.debug(f"Skipping {candidate.name}: outside travel limits ({time_a}/{time_b})")
            return None

        return MeetingPoint(
            station=candidate,
            time_from_a=time_a,
            time_from_b=time_b,
            fairness_score=fairness_score,
        )

    def _top(self, points: list[MeetingPoint]) -> list[MeetingPoint]:
        # sorted() is stable with reverse=True, so ties keep candidate order
        ranked = sorted(points, key=lambda point: point.ranking_score, reverse=True)
        return ranked[: self.top_n]

    async def _category_count(
        self,
        venue_cache: "VenueCacheProtocol",
        coordinates: Coordinates,
        category: str,
        enabled: bool,
    ) -> int:
        if not enabled:
            return 0
        venues = await self._call(
            f"venue search {category}",
            venue_cache.get_venues(coordinates, category),
            self._venues_timed,
        )
        return len(venues) if venues else 0

    async def _score_venues(
        self, venue_cache: "VenueCacheProtocol", point: MeetingPoint, options: RankingOptions
    ) -> None:
        coordinates = Coordinates(lat=point.station.lat, lon=point.station.lon)
        categories = list(options.venue_filters.items())
        counts = await asyncio.gather(
            *(
                self._category_count(venue_cache, coordinates, category, enabled)
                for category, enabled in categories
            )
        )
        point.venue_counts = VenueCounts(
            counts={category: count for (category, _), count in zip(categories, counts)}
        )
        point.venue_score = self._venue_scorer.score(point.venue_counts)
        point.final_score = blend_scores(point.fairness_score, point.venue_score)
