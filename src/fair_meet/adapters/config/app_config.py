"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# London interchanges used when no allow-list is configured
DEFAULT_INTERCHANGE_NAMES = [
    "King",
    "Liverpool",
    "Oxford",
    "Victoria",
    "Paddington",
    "Waterloo",
    "London Bridge",
    "Canary Wharf",
    "Stratford",
    "Green Park",
    "Westminster",
    "Leicester Square",
]

DEFAULT_VENUE_CATEGORIES = ["cafe", "bar", "restaurant"]


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Geocoding (postcodes.io)
    postcodes_api_base: str = Field(
        default="https://api.postcodes.io", description="Base URL of the postcodes.io API"
    )

    # Transit (TfL Unified API)
    tfl_api_base: str = Field(
        default="https://api.tfl.gov.uk", description="Base URL of the TfL Unified API"
    )
    tfl_app_key: str | None = Field(
        default=None, description="Optional TfL app key for higher rate limits"
    )
    tfl_modes: list[str] = Field(
        default_factory=lambda: ["tube", "elizabeth-line"],
        description="Transport modes used for station lookup and journey planning",
    )
    tfl_nearest_radius_meters: int = Field(
        default=2000, description="Search radius for the nearest station lookup"
    )
    tfl_min_delay_seconds: float = Field(
        default=0.0, description="Minimum delay between TfL requests in seconds"
    )

    # Venues (Google Places)
    google_places_api_base: str = Field(
        default="https://maps.googleapis.com/maps/api/place",
        description="Base URL of the Google Places API",
    )
    google_places_api_key: str | None = Field(
        default=None, description="Google Places API key; venue scoring is skipped without it"
    )
    places_min_delay_seconds: float = Field(
        default=0.1, description="Minimum delay between Places requests in seconds"
    )
    venue_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VENUE_CATEGORIES),
        description="Venue categories counted around each recommendation",
    )
    venue_radius_meters: int = Field(
        default=400, description="Venue search radius around a station (about a 5 minute walk)"
    )
    venue_category_weights: dict[str, float] = Field(
        default_factory=dict,
        description="Per-category multipliers for the venue score; unlisted categories count once",
    )

    # Venue cache
    venue_cache_ttl_hours: float = Field(default=24.0, description="Lifetime of a cache entry")
    venue_cache_sweep_interval_minutes: float = Field(
        default=60.0, description="Interval between sweeps of expired cache entries"
    )
    venue_cache_precision: int = Field(
        default=2, description="Decimal places of latitude/longitude kept in cache keys"
    )

    # Ranking
    provider_timeout_seconds: float = Field(
        default=8.0, description="Timeout for each external provider call in seconds"
    )
    max_candidates: int = Field(
        default=20, description="Maximum number of candidate stations evaluated per request"
    )
    top_n: int = Field(default=3, description="Number of recommendations returned")
    interchange_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INTERCHANGE_NAMES),
        description="Station name fragments treated as major interchanges",
    )
    interchange_modes: list[str] = Field(
        default_factory=list,
        description="Transport modes that mark a station as an interchange",
    )

    # TOML config file path; missing default file is not an error
    config_file: str | None = Field(
        default="config.example.toml",
        description="Path to TOML configuration file for candidates, venues and engine settings",
    )

    @field_validator("provider_timeout_seconds")
    @classmethod
    def validate_provider_timeout(cls, v: float) -> float:
        """Validate the provider timeout is positive and bounded."""
        if not 0 < v <= 60:
            raise ValueError("provider_timeout_seconds must be between 0 and 60")
        return v

    @field_validator("max_candidates", "top_n", "venue_radius_meters", "tfl_nearest_radius_meters")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts and radii are positive."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("venue_category_weights")
    @classmethod
    def validate_category_weights(cls, v: dict[str, float]) -> dict[str, float]:
        """Validate venue weights are not negative."""
        negative = sorted(category for category, weight in v.items() if weight < 0)
        if negative:
            raise ValueError(f"venue weights must not be negative: {', '.join(negative)}")
        return v

    @field_validator("venue_cache_ttl_hours", "venue_cache_sweep_interval_minutes")
    @classmethod
    def validate_positive_duration(cls, v: float) -> float:
        """Validate cache durations are positive."""
        if v <= 0:
            raise ValueError("cache durations must be positive")
        return v

    @property
    def venue_cache_ttl_seconds(self) -> float:
        """Cache entry lifetime in seconds."""
        return self.venue_cache_ttl_hours * 3600

    @property
    def venue_cache_sweep_interval_seconds(self) -> float:
        """Cache sweep interval in seconds."""
        return self.venue_cache_sweep_interval_minutes * 60

    def _read_toml(self, required: bool) -> dict[str, Any]:
        if not self.config_file:
            if required:
                raise ValueError("config_file must be set to load TOML configuration")
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            if required:
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return {}

        with open(config_path, "rb") as f:
            return tomllib.load(f)

    def load_toml(self, required: bool = False) -> dict[str, Any]:
        """Load the TOML file and apply its sections over the current settings.

        Supported sections are ``[candidates]`` (interchange_names,
        interchange_modes), ``[venues]`` (categories, radius_meters, weights) and
        ``[engine]`` (top_n, max_candidates, provider_timeout_seconds).

        Args:
            required: Raise if the file is not configured or missing.

        Returns:
            The parsed TOML data.
        """
        toml_data = self._read_toml(required)

        candidates = toml_data.get("candidates", {})
        if not isinstance(candidates, dict):
            raise ValueError("TOML config 'candidates' must be a table")
        if "interchange_names" in candidates:
            self.interchange_names = _string_list(candidates, "interchange_names")
        if "interchange_modes" in candidates:
            self.interchange_modes = _string_list(candidates, "interchange_modes")

        venues = toml_data.get("venues", {})
        if not isinstance(venues, dict):
            raise ValueError("TOML config 'venues' must be a table")
        if "categories" in venues:
            self.venue_categories = _string_list(venues, "categories")
        if "radius_meters" in venues:
            self.venue_radius_meters = self.validate_positive(int(venues["radius_meters"]))
        if "weights" in venues:
            self.venue_category_weights = self.validate_category_weights(
                _number_table(venues, "weights")
            )

        engine = toml_data.get("engine", {})
        if not isinstance(engine, dict):
            raise ValueError("TOML config 'engine' must be a table")
        if "top_n" in engine:
            self.top_n = self.validate_positive(int(engine["top_n"]))
        if "max_candidates" in engine:
            self.max_candidates = self.validate_positive(int(engine["max_candidates"]))
        if "provider_timeout_seconds" in engine:
            self.provider_timeout_seconds = self.validate_provider_timeout(
                float(engine["provider_timeout_seconds"])
            )

        return toml_data


def _string_list(section: dict[str, Any], key: str) -> list[str]:
    value = section[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"TOML config '{key}' must be a list of strings")
    return value


def _number_table(section: dict[str, Any], key: str) -> dict[str, float]:
    value = section[key]
    if not isinstance(value, dict) or not all(
        isinstance(weight, int | float) and not isinstance(weight, bool)
        for weight in value.values()
    ):
        raise ValueError(f"TOML config '{key}' must be a table of numbers")
    return {str(category): float(weight) for category, weight in value.items()}
