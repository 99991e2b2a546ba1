"""Tests for the ranking engine."""

import asyncio

import pytest

from fair_meet.adapters.api_rate_limiter import ApiRateLimiter
from fair_meet.adapters.cache import VenueCache
from fair_meet.application.services import CandidateSelector, RankingEngine, blend_scores
from fair_meet.domain.errors import (
    CandidateExhaustionError,
    GeocodeError,
    NoMeetingPointsError,
    NoStationFoundError,
    ProviderTimeoutError,
    Side,
)
from fair_meet.domain.models import Coordinates, JourneyLeg, RankingOptions, Station, Venue

CANARY_WHARF_POSTCODE = "E14 5AB"
ISLINGTON_POSTCODE = "N1 9AG"

COORDS_A = Coordinates(lat=51.5049, lon=-0.0195)
COORDS_B = Coordinates(lat=51.5362, lon=-0.1033)

HOME_A = Station(id="home-a", name="Canary Wharf", lat=51.5035, lon=-0.0187)
HOME_B = Station(id="home-b", name="Angel", lat=51.5322, lon=-0.1058)

KINGS_CROSS = Station(id="kx", name="King's Cross St. Pancras", lat=51.5308, lon=-0.1238)
GREEN_PARK = Station(id="gp", name="Green Park", lat=51.5067, lon=-0.1428)
VICTORIA = Station(id="vic", name="Victoria", lat=51.4965, lon=-0.1447)
OXFORD_CIRCUS = Station(id="oxc", name="Oxford Circus", lat=51.5152, lon=-0.1415)
WATERLOO = Station(id="wat", name="Waterloo", lat=51.5036, lon=-0.1143)
BANK = Station(id="bnk", name="Bank", lat=51.5133, lon=-0.0886)

INTERCHANGES = ["King", "Green Park", "Victoria", "Oxford", "Waterloo"]


class FakeGeoProvider:
    """Geo provider backed by a dict."""

    def __init__(self, locations: dict[str, Coordinates], fail: bool = False) -> None:
        """Initialize with known locations."""
        self.locations = locations
        self.fail = fail

    async def resolve(self, location_text: str) -> Coordinates | None:
        """Look up a location."""
        if self.fail:
            raise ConnectionError("postcodes.io unreachable")
        return self.locations.get(location_text)


class FakeTransitProvider:
    """Transit provider backed by dicts; records journey lookups."""

    def __init__(
        self,
        nearest: dict[Coordinates, Station],
        stations: list[Station],
        times: dict[tuple[str, str], float],
    ) -> None:
        """Initialize with nearest stations, the station list and journey times."""
        self.nearest = nearest
        self.stations = stations
        self.times = times
        self.slow: set[tuple[str, str]] = set()
        self.broken: set[tuple[str, str]] = set()
        self.fail_station_list = False
        self.journey_calls: list[tuple[str, str]] = []

    async def nearest_station(self, coordinates: Coordinates) -> Station | None:
        """Look up the nearest station."""
        return self.nearest.get(coordinates)

    async def all_stations(self) -> list[Station]:
        """Return the configured station list."""
        if self.fail_station_list:
            raise ConnectionError("TfL unreachable")
        return list(self.stations)

    async def journey_time(self, from_station_id: str, to_station_id: str) -> JourneyLeg | None:
        """Return the configured journey time, stalling or failing when told to."""
        key = (from_station_id, to_station_id)
        self.journey_calls.append(key)
        if key in self.slow:
            await asyncio.sleep(5)
        if key in self.broken:
            raise ConnectionError("TfL returned garbage")
        duration = self.times.get(key)
        if duration is None:
            return None
        return JourneyLeg(
            from_station_id=from_station_id,
            to_station_id=to_station_id,
            duration_minutes=duration,
        )


class FakeVenueProvider:
    """Venue provider returning a configured number of venues per station and category."""

    def __init__(self, counts: dict[tuple[float, float], dict[str, int]]) -> None:
        """Initialize with counts keyed by rounded coordinates."""
        self.counts = counts
        self.calls: list[tuple[Coordinates, str]] = []

    async def search(
        self, coordinates: Coordinates, category: str, radius_meters: int  # noqa: ARG002
    ) -> list[Venue]:
        """Return synthetic venues."""
        self.calls.append((coordinates, category))
        key = (round(coordinates.lat, 2), round(coordinates.lon, 2))
        count = self.counts.get(key, {}).get(category, 0)
        return [
            Venue(id=f"{category}{i}", name=f"{category} {i}", category=category, lat=0, lon=0)
            for i in range(count)
        ]


def _key(station: Station) -> tuple[float, float]:
    return (round(station.lat, 2), round(station.lon, 2))


@pytest.fixture
def geo_provider() -> FakeGeoProvider:
    """Geo provider that knows both postcodes."""
    return FakeGeoProvider({CANARY_WHARF_POSTCODE: COORDS_A, ISLINGTON_POSTCODE: COORDS_B})


@pytest.fixture
def transit_provider() -> FakeTransitProvider:
    """Transit provider where King's Cross is fairest, then Green Park, then Victoria."""
    times = {
        ("home-a", "kx"): 20,
        ("home-b", "kx"): 20,
        ("home-a", "gp"): 15,
        ("home-b", "gp"): 25,
        ("home-a", "vic"): 10,
        ("home-b", "vic"): 50,
        ("home-a", "oxc"): 50,
        ("home-b", "oxc"): 50,
        # Waterloo has no route from A
        ("home-b", "wat"): 12,
        ("home-a", "bnk"): 5,
        ("home-b", "bnk"): 5,
    }
    return FakeTransitProvider(
        nearest={COORDS_A: HOME_A, COORDS_B: HOME_B},
        stations=[BANK, KINGS_CROSS, VICTORIA, OXFORD_CIRCUS, WATERLOO, GREEN_PARK],
        times=times,
    )


@pytest.fixture
def venue_provider() -> FakeVenueProvider:
    """Green Park is packed with cafes; nothing elsewhere."""
    return FakeVenueProvider({_key(GREEN_PARK): {"cafe": 500}})


@pytest.fixture
def venue_cache(venue_provider: FakeVenueProvider) -> VenueCache:
    """Venue cache over the fake venue provider."""
    return VenueCache(venue_provider)


@pytest.fixture
def engine(
    geo_provider: FakeGeoProvider,
    transit_provider: FakeTransitProvider,
    venue_cache: VenueCache,
) -> RankingEngine:
    """Engine wired to the fakes."""
    return RankingEngine(
        geo_provider=geo_provider,
        transit_provider=transit_provider,
        candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
        venue_cache=venue_cache,
        provider_timeout_seconds=0.2,
    )


class TestFairnessRanking:
    """Tests for ranking without venue data."""

    @pytest.mark.asyncio
    async def test_ranks_top_three_by_fairness(self, engine: RankingEngine) -> None:
        """Given scored candidates, when ranking, then the three fairest come first."""
        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["kx", "gp", "vic"]
        scores = [p.fairness_score for p in result.recommendations]
        assert scores == pytest.approx([77.78, 57.78, 26.67], abs=0.01)

    @pytest.mark.asyncio
    async def test_meeting_point_carries_travel_times(self, engine: RankingEngine) -> None:
        """Given a recommendation, then its derived times match the legs."""
        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        victoria = result.recommendations[2]
        assert victoria.time_from_a == 10
        assert victoria.time_from_b == 50
        assert victoria.time_difference == 40
        assert victoria.total_time == 60
        assert victoria.final_score is None
        assert victoria.venue_counts is None

    @pytest.mark.asyncio
    async def test_excluded_and_unreachable_candidates_are_dropped(
        self, engine: RankingEngine
    ) -> None:
        """Given one candidate over the limit and one without a route, then both are gone."""
        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        ids = {p.station.id for p in result.recommendations}
        assert "oxc" not in ids
        assert "wat" not in ids
        assert all(p.fairness_score > 0 for p in result.recommendations)

    @pytest.mark.asyncio
    async def test_result_includes_resolved_locations(self, engine: RankingEngine) -> None:
        """Given two postcodes, when ranking, then both resolutions are returned."""
        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert result.location_a.input == CANARY_WHARF_POSTCODE
        assert result.location_a.coordinates == COORDS_A
        assert result.location_a.nearest_station == HOME_A
        assert result.location_b.input == ISLINGTON_POSTCODE
        assert result.location_b.nearest_station == HOME_B

    @pytest.mark.asyncio
    async def test_only_selected_candidates_are_evaluated(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given a station outside the allow-list, then no journey is requested for it."""
        await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert all(to_id != "bnk" for _, to_id in transit_provider.journey_calls)

    @pytest.mark.asyncio
    async def test_top_n_is_configurable(
        self, geo_provider: FakeGeoProvider, transit_provider: FakeTransitProvider
    ) -> None:
        """Given top_n=1, when ranking, then a single recommendation is returned."""
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
            top_n=1,
        )

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["kx"]


class TestVenueBlending:
    """Tests for venue scoring of the top candidates."""

    @pytest.mark.asyncio
    async def test_venues_rerank_top_candidates(self, engine: RankingEngine) -> None:
        """Given a venue-rich second place, when venues are included, then it moves up."""
        result = await engine.rank(
            CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, RankingOptions(include_venues=True)
        )

        assert [p.station.id for p in result.recommendations] == ["gp", "kx", "vic"]
        green_park = result.recommendations[0]
        assert green_park.venue_counts is not None
        assert green_park.venue_counts.counts == {"cafe": 500, "bar": 0, "restaurant": 0}
        assert green_park.venue_score == pytest.approx(50.0)
        assert green_park.final_score == green_park.fairness_score * 0.7 + 50.0 * 0.3

    @pytest.mark.asyncio
    async def test_only_top_candidates_get_venue_lookups(
        self, engine: RankingEngine, venue_provider: FakeVenueProvider
    ) -> None:
        """Given three recommendations and three categories, then nine searches run."""
        await engine.rank(
            CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, RankingOptions(include_venues=True)
        )

        assert len(venue_provider.calls) == 9

    @pytest.mark.asyncio
    async def test_disabled_category_is_not_searched(
        self, engine: RankingEngine, venue_provider: FakeVenueProvider
    ) -> None:
        """Given cafes switched off, when ranking, then cafes count 0 without a search."""
        options = RankingOptions(include_venues=True, venue_filters={"cafe": False})

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, options)

        assert all(category != "cafe" for _, category in venue_provider.calls)
        assert [p.station.id for p in result.recommendations] == ["kx", "gp", "vic"]
        for point in result.recommendations:
            assert point.venue_counts is not None
            assert point.venue_counts.get("cafe") == 0
            assert point.final_score == pytest.approx(point.fairness_score * 0.7)

    @pytest.mark.asyncio
    async def test_without_cache_venues_are_skipped(
        self, geo_provider: FakeGeoProvider, transit_provider: FakeTransitProvider
    ) -> None:
        """Given no venue cache, when venues are requested, then fairness order is kept."""
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
        )

        result = await engine.rank(
            CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, RankingOptions(include_venues=True)
        )

        assert [p.station.id for p in result.recommendations] == ["kx", "gp", "vic"]
        assert all(p.final_score is None for p in result.recommendations)

    @pytest.mark.asyncio
    async def test_failed_venue_search_counts_as_zero(
        self,
        geo_provider: FakeGeoProvider,
        transit_provider: FakeTransitProvider,
        venue_provider: FakeVenueProvider,
    ) -> None:
        """Given a venue search that raises, when ranking, then that category counts 0."""

        class FlakyCache:
            async def get_venues(self, coordinates: Coordinates, category: str) -> list[Venue]:
                if category == "cafe":
                    raise ConnectionError("Places down")
                return await venue_provider.search(coordinates, category, 400)

        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
            venue_cache=FlakyCache(),
        )

        result = await engine.rank(
            CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, RankingOptions(include_venues=True)
        )

        assert [p.station.id for p in result.recommendations] == ["kx", "gp", "vic"]
        assert all(p.venue_score == 0 for p in result.recommendations)

    @pytest.mark.asyncio
    async def test_ranking_is_idempotent_with_warm_cache(
        self, engine: RankingEngine, venue_provider: FakeVenueProvider
    ) -> None:
        """Given a warm cache, when ranking twice, then output is identical and no new searches."""
        options = RankingOptions(include_venues=True)

        first = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, options)
        searches = len(venue_provider.calls)
        second = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE, options)

        assert second.recommendations == first.recommendations
        assert len(venue_provider.calls) == searches


class TestBlend:
    """Tests for the final score blend."""

    @pytest.mark.parametrize("venue_score", [0.0, 1.2, 50.0, 10_000.0])
    def test_blend_is_exact_and_unclamped(self, venue_score: float) -> None:
        """Given any venue score, when blending, then final = 0.7 f + 0.3 v."""
        assert blend_scores(77.78, venue_score) == 77.78 * 0.7 + venue_score * 0.3


class TestEdgeCases:
    """Tests for degenerate inputs."""

    @pytest.mark.asyncio
    async def test_no_survivors_returns_empty_list(
        self, geo_provider: FakeGeoProvider, transit_provider: FakeTransitProvider
    ) -> None:
        """Given every candidate over the limits, when ranking, then the list is empty."""
        transit_provider.stations = [OXFORD_CIRCUS]
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
        )

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert result.recommendations == []
        with pytest.raises(NoMeetingPointsError):
            result.raise_if_empty()

    @pytest.mark.asyncio
    async def test_shared_nearest_station_scores_maximum(
        self, geo_provider: FakeGeoProvider
    ) -> None:
        """Given both people nearest to the same candidate, then it scores 100 without lookups."""
        transit_provider = FakeTransitProvider(
            nearest={COORDS_A: KINGS_CROSS, COORDS_B: KINGS_CROSS},
            stations=[VICTORIA, KINGS_CROSS],
            times={("kx", "vic"): 10},
        )
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
        )

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["kx", "vic"]
        assert result.recommendations[0].fairness_score == 100
        assert ("kx", "kx") not in transit_provider.journey_calls

    @pytest.mark.asyncio
    async def test_ties_keep_candidate_order(self, geo_provider: FakeGeoProvider) -> None:
        """Given two equally fair candidates, when ranking, then the first listed wins."""
        times = {
            ("home-a", "vic"): 15,
            ("home-b", "vic"): 15,
            ("home-a", "wat"): 15,
            ("home-b", "wat"): 15,
        }

        for stations, expected in (
            ([VICTORIA, WATERLOO], ["vic", "wat"]),
            ([WATERLOO, VICTORIA], ["wat", "vic"]),
        ):
            transit_provider = FakeTransitProvider(
                nearest={COORDS_A: HOME_A, COORDS_B: HOME_B}, stations=stations, times=times
            )
            engine = RankingEngine(
                geo_provider,
                transit_provider,
                candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
            )

            result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

            assert [p.station.id for p in result.recommendations] == expected

    @pytest.mark.asyncio
    async def test_candidate_cap_is_enforced_before_lookups(
        self, geo_provider: FakeGeoProvider
    ) -> None:
        """Given 30 candidates, when ranking, then only the first 20 are looked up."""
        stations = [
            Station(id=f"k{i}", name=f"King Street {i}", lat=51.5, lon=-0.1) for i in range(30)
        ]
        transit_provider = FakeTransitProvider(
            nearest={COORDS_A: HOME_A, COORDS_B: HOME_B}, stations=stations, times={}
        )
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=["King"]),
        )

        await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        looked_up = {to_id for _, to_id in transit_provider.journey_calls}
        assert looked_up == {f"k{i}" for i in range(20)}
        assert len(transit_provider.journey_calls) == 40


class TestProviderFailures:
    """Tests for per-candidate failure absorption."""

    @pytest.mark.asyncio
    async def test_timed_out_leg_excludes_only_that_candidate(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given a stalled journey lookup, when ranking, then that candidate is dropped."""
        transit_provider.slow.add(("home-b", "gp"))

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["kx", "vic"]

    @pytest.mark.asyncio
    async def test_raising_leg_excludes_only_that_candidate(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given a journey lookup that raises, when ranking, then that candidate is dropped."""
        transit_provider.broken.add(("home-a", "kx"))

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["gp", "vic"]

    @pytest.mark.asyncio
    async def test_all_legs_timing_out_returns_empty(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given every lookup stalling, when ranking, then an empty list is returned."""
        transit_provider.slow.update(transit_provider.times)

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert result.recommendations == []


class RateLimitedTransitProvider(FakeTransitProvider):
    """Transit provider that queues behind a rate limiter and times its own requests."""

    applies_request_timeout = True

    def __init__(
        self,
        stations: list[Station],
        times: dict[tuple[str, str], float],
        min_delay_seconds: float,
        request_timeout_seconds: float,
    ) -> None:
        """Initialize with a shared limiter and a per-request time budget."""
        super().__init__({COORDS_A: HOME_A, COORDS_B: HOME_B}, stations, times)
        self.rate_limiter = ApiRateLimiter("tfl", min_delay_seconds)
        self.request_timeout_seconds = request_timeout_seconds

    async def journey_time(self, from_station_id: str, to_station_id: str) -> JourneyLeg | None:
        """Wait for a slot, then answer within the request budget."""
        await self.rate_limiter.acquire()
        try:
            async with asyncio.timeout(self.request_timeout_seconds):
                return await super().journey_time(from_station_id, to_station_id)
        except TimeoutError as e:
            raise ProviderTimeoutError(
                f"journey {from_station_id} -> {to_station_id}", self.request_timeout_seconds
            ) from e


class TestRateLimitedProviders:
    """Tests for providers that queue behind a rate limiter."""

    @pytest.mark.asyncio
    async def test_queueing_for_the_limiter_does_not_time_out(
        self, geo_provider: FakeGeoProvider
    ) -> None:
        """Given 40 queued leg lookups longer than the budget, then every candidate survives."""
        stations = [
            Station(id=f"s{i}", name=f"King Street {i}", lat=51.5, lon=-0.1) for i in range(20)
        ]
        times = {(home, s.id): 20 for s in stations for home in ("home-a", "home-b")}
        transit_provider = RateLimitedTransitProvider(
            stations, times, min_delay_seconds=0.02, request_timeout_seconds=0.2
        )
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=["King"]),
            top_n=20,
            provider_timeout_seconds=0.2,
        )

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert len(transit_provider.journey_calls) == 40
        assert len(result.recommendations) == 20

    @pytest.mark.asyncio
    async def test_slow_request_after_the_limiter_still_times_out(
        self, geo_provider: FakeGeoProvider
    ) -> None:
        """Given a stalled request once through the limiter, then only its candidate drops."""
        times = {
            ("home-a", "kx"): 20,
            ("home-b", "kx"): 20,
            ("home-a", "gp"): 15,
            ("home-b", "gp"): 25,
        }
        transit_provider = RateLimitedTransitProvider(
            [KINGS_CROSS, GREEN_PARK], times, min_delay_seconds=0.01, request_timeout_seconds=0.1
        )
        transit_provider.slow.add(("home-b", "kx"))
        engine = RankingEngine(
            geo_provider,
            transit_provider,
            candidate_selector=CandidateSelector(interchange_names=INTERCHANGES),
            provider_timeout_seconds=5,
        )

        result = await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert [p.station.id for p in result.recommendations] == ["gp"]


class TestRequestErrors:
    """Tests for errors that fail the whole request."""

    @pytest.mark.asyncio
    async def test_unknown_location_a_raises_geocode_error(self, engine: RankingEngine) -> None:
        """Given an unknown first location, when ranking, then side A is reported."""
        with pytest.raises(GeocodeError) as exc_info:
            await engine.rank("ZZ99 9ZZ", ISLINGTON_POSTCODE)

        assert exc_info.value.sides == (Side.A,)
        assert exc_info.value.side == Side.A

    @pytest.mark.asyncio
    async def test_both_unknown_reports_both_sides(self, engine: RankingEngine) -> None:
        """Given two unknown locations, when ranking, then both sides are reported."""
        with pytest.raises(GeocodeError) as exc_info:
            await engine.rank("nowhere", "also nowhere")

        assert exc_info.value.sides == (Side.A, Side.B)

    @pytest.mark.asyncio
    async def test_geo_provider_failure_is_a_geocode_error(
        self, transit_provider: FakeTransitProvider
    ) -> None:
        """Given a geo provider that raises, when ranking, then GeocodeError is raised."""
        engine = RankingEngine(FakeGeoProvider({}, fail=True), transit_provider)

        with pytest.raises(GeocodeError):
            await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

    @pytest.mark.asyncio
    async def test_missing_station_raises_no_station_found(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given no station near B, when ranking, then side B is reported."""
        del transit_provider.nearest[COORDS_B]

        with pytest.raises(NoStationFoundError) as exc_info:
            await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

        assert exc_info.value.sides == (Side.B,)

    @pytest.mark.asyncio
    async def test_no_candidates_raises_exhaustion(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given no allow-listed stations, when ranking, then CandidateExhaustionError."""
        transit_provider.stations = [BANK]

        with pytest.raises(CandidateExhaustionError):
            await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)

    @pytest.mark.asyncio
    async def test_station_list_failure_raises_exhaustion(
        self, engine: RankingEngine, transit_provider: FakeTransitProvider
    ) -> None:
        """Given the station list failing, when ranking, then CandidateExhaustionError."""
        transit_provider.fail_station_list = True

        with pytest.raises(CandidateExhaustionError):
            await engine.rank(CANARY_WHARF_POSTCODE, ISLINGTON_POSTCODE)


class TestConstruction:
    """Tests for engine argument validation."""

    def test_rejects_zero_top_n(
        self, geo_provider: FakeGeoProvider, transit_provider: FakeTransitProvider
    ) -> None:
        """Given top_n=0, when constructing, then ValueError is raised."""
        with pytest.raises(ValueError, match="top_n"):
            RankingEngine(geo_provider, transit_provider, top_n=0)

    def test_rejects_non_positive_timeout(
        self, geo_provider: FakeGeoProvider, transit_provider: FakeTransitProvider
    ) -> None:
        """Given a zero timeout, when constructing, then ValueError is raised."""
        with pytest.raises(ValueError, match="timeout"):
            RankingEngine(geo_provider, transit_provider, provider_timeout_seconds=0)
