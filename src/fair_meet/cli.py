"""Command-line runner for fair meeting point recommendations."""

import argparse
import asyncio
import logging
import sys

import aiohttp

from fair_meet.adapters.api_rate_limiter import ApiRateLimiter
from fair_meet.adapters.cache import VenueCache
from fair_meet.adapters.config import AppConfig
from fair_meet.adapters.places_api import GooglePlacesVenueProvider
from fair_meet.adapters.postcodes_api import PostcodesIoGeoProvider
from fair_meet.adapters.tfl_api import TflTransitProvider
from fair_meet.application.services import CandidateSelector, RankingEngine, VenueScorer
from fair_meet.domain.errors import FairMeetError, NoMeetingPointsError
from fair_meet.domain.models import RankingOptions, RankingResult

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_NO_RESULTS = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Find fair meeting points between two London postcodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rank meeting points, including nearby cafes, bars and restaurants
  fair-meet "E14 5AB" "N1 9AG"

  # Rank by travel time only
  fair-meet "E14 5AB" "N1 9AG" --no-venues

  # Ignore bars when counting venues, print JSON
  fair-meet "E14 5AB" "N1 9AG" --disable bar --json
        """,
    )
    parser.add_argument("location_a", help="First person's postcode")
    parser.add_argument("location_b", help="Second person's postcode")
    parser.add_argument(
        "--no-venues", action="store_true", help="Rank by travel time fairness only"
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="CATEGORY",
        help="Venue category to leave out (repeatable)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def build_engine(
    config: AppConfig, session: aiohttp.ClientSession, venue_cache: VenueCache | None
) -> RankingEngine:
    """Wire the ranking engine to the HTTP providers."""
    transit_provider = TflTransitProvider(
        session,
        base_url=config.tfl_api_base,
        modes=config.tfl_modes,
        app_key=config.tfl_app_key,
        nearest_radius_meters=config.tfl_nearest_radius_meters,
        rate_limiter=ApiRateLimiter("tfl", config.tfl_min_delay_seconds),
        request_timeout_seconds=config.provider_timeout_seconds,
    )
    return RankingEngine(
        geo_provider=PostcodesIoGeoProvider(session, base_url=config.postcodes_api_base),
        transit_provider=transit_provider,
        candidate_selector=CandidateSelector(
            interchange_names=config.interchange_names,
            interchange_modes=config.interchange_modes,
            max_candidates=config.max_candidates,
        ),
        venue_cache=venue_cache,
        venue_categories=config.venue_categories,
        venue_scorer=VenueScorer(config.venue_category_weights),
        top_n=config.top_n,
        provider_timeout_seconds=config.provider_timeout_seconds,
    )


def build_venue_cache(config: AppConfig, session: aiohttp.ClientSession) -> VenueCache | None:
    """Create the venue cache, or None when no Places API key is configured."""
    if not config.google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY not set, venue scoring disabled")
        return None
    provider = GooglePlacesVenueProvider(
        session,
        api_key=config.google_places_api_key,
        base_url=config.google_places_api_base,
        rate_limiter=ApiRateLimiter("google_places", config.places_min_delay_seconds),
        request_timeout_seconds=config.provider_timeout_seconds,
    )
    return VenueCache(
        provider,
        ttl_seconds=config.venue_cache_ttl_seconds,
        sweep_interval_seconds=config.venue_cache_sweep_interval_seconds,
        precision=config.venue_cache_precision,
        radius_meters=config.venue_radius_meters,
    )


def format_result(result: RankingResult) -> str:
    """Human-readable summary of a ranking result."""
    lines = [
        f"A: {result.location_a.input} -> {result.location_a.nearest_station.name}",
        f"B: {result.location_b.input} -> {result.location_b.nearest_station.name}",
        "",
    ]
    for position, point in enumerate(result.recommendations, 1):
        line = (
            f"{position}. {point.station.name}: "
            f"{point.time_from_a:.0f} / {point.time_from_b:.0f} min, "
            f"fairness {point.fairness_score:.1f}"
        )
        if point.final_score is not None and point.venue_counts is not None:
            line += f", {point.venue_counts.total} venues, score {point.final_score:.1f}"
        lines.append(line)
    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    """Rank meeting points for the parsed arguments and print them."""
    config = AppConfig(config_file=args.config) if args.config else AppConfig()
    config.load_toml(required=bool(args.config))

    options = RankingOptions(
        include_venues=not args.no_venues,
        venue_filters={category: False for category in args.disable},
    )

    async with aiohttp.ClientSession() as session:
        venue_cache = build_venue_cache(config, session)
        engine = build_engine(config, session, venue_cache)
        if venue_cache is not None:
            await venue_cache.start()
        try:
            result = await engine.rank(args.location_a, args.location_b, options)
        finally:
            if venue_cache is not None:
                await venue_cache.stop()

    if args.json:
        print(result.model_dump_json(indent=2))
    try:
        result.raise_if_empty()
    except NoMeetingPointsError as e:
        if not args.json:
            print(f"{e}. Try locations closer to central London.", file=sys.stderr)
        return EXIT_NO_RESULTS
    if not args.json:
        print(format_result(result))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(run(args))
    except FairMeetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_ERROR


def cli_main() -> None:
    """Synchronous entry point for the console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
