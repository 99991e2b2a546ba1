"""Time-bounded venue cache in front of a venue provider."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fair_meet.domain.contracts.venue_cache import VenueCacheProtocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from fair_meet.domain.models.coordinates import Coordinates
    from fair_meet.domain.models.venue import Venue
    from fair_meet.domain.ports.venue_provider import VenueProvider

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60
# Two decimal places is roughly 1.1 km, so stations close together share an entry
DEFAULT_PRECISION = 2
DEFAULT_RADIUS_METERS = 400

CacheKey = tuple[float, float, str]


@dataclass(frozen=True)
class CacheEntry:
    """Venues returned by one successful search and when they were fetched."""

    data: list[Venue]
    timestamp: float


@dataclass
class CacheStats:
    """Counters for cache behaviour."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    duplicate_fetches: int = 0


class VenueCache(VenueCacheProtocol):
    """In-memory TTL cache for venue searches keyed by rounded location and category.

    Each key has its own lock, so unrelated lookups never wait on each other.
    The upstream search runs outside the lock: two concurrent misses on the
    same key may both hit the provider, and the later result wins. Failed
    searches are never stored.
    """

    def __init__(
        self,
        provider: VenueProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        precision: int = DEFAULT_PRECISION,
        radius_meters: int = DEFAULT_RADIUS_METERS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            provider: Upstream venue search.
            ttl_seconds: How long an entry stays valid.
            sweep_interval_seconds: Interval of the background sweep.
            precision: Decimal places kept from coordinates when building keys.
            radius_meters: Search radius passed to the provider.
            clock: Monotonic time source, replaceable in tests.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._provider = provider
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self.precision = precision
        self.radius_meters = radius_meters
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._locks: dict[CacheKey, asyncio.Lock] = {}
        self._in_flight: dict[CacheKey, int] = {}
        self._sweep_task: asyncio.Task | None = None
        self.stats = CacheStats()

    def make_key(self, coordinates: Coordinates, category: str) -> CacheKey:
        """Build the cache key for a point and category."""
        return (
            round(coordinates.lat, self.precision),
            round(coordinates.lon, self.precision),
            category,
        )

    def _lock_for(self, key: CacheKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _discard_idle_lock(self, key: CacheKey) -> None:
        """Forget the lock of a key that has no entry and no search in flight."""
        lock = self._locks.get(key)
        if lock is None or lock.locked() or key in self._entries or key in self._in_flight:
            return
        del self._locks[key]

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp >= self.ttl_seconds

    async def _read(self, key: CacheKey) -> list[Venue] | None:
        async with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                self.stats.evictions += 1
                return None
            return entry.data

    async def _write(self, key: CacheKey, venues: list[Venue]) -> None:
        async with self._lock_for(key):
            self._entries[key] = CacheEntry(data=list(venues), timestamp=self._clock())

    async def get_venues(self, coordinates: Coordinates, category: str) -> list[Venue]:
        """Get venues for a point and category, searching upstream on a miss."""
        key = self.make_key(coordinates, category)

        cached = await self._read(key)
        if cached is not None:
            self.stats.hits += 1
            logger.debug(f"Venue cache hit for {key}")
            return list(cached)

        self.stats.misses += 1
        if self._in_flight.get(key):
            self.stats.duplicate_fetches += 1
            logger.debug(f"Concurrent venue search already in flight for {key}")

        self._in_flight[key] = self._in_flight.get(key, 0) + 1
        try:
            # Raises VenueProviderError on failure, leaving the cache untouched
            venues = await self._provider.search(
                coordinates, category, radius_meters=self.radius_meters
            )
        finally:
            remaining = self._in_flight[key] - 1
            if remaining:
                self._in_flight[key] = remaining
            else:
                del self._in_flight[key]
            # Keys without an entry keep no lock; a successful write creates it again
            self._discard_idle_lock(key)

        await self._write(key, venues)
        return list(venues)

    async def sweep(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        removed = 0
        for key in list(self._entries):
            async with self._lock_for(key):
                entry = self._entries.get(key)
                if entry is not None and self._is_expired(entry, now):
                    del self._entries[key]
                    removed += 1
        for key in list(self._locks):
            self._discard_idle_lock(key)
        self.stats.evictions += removed
        if removed:
            logger.info(f"Venue cache sweep removed {removed} expired entries")
        return removed

    def clear(self) -> None:
        """Drop all entries and the locks of keys with no search in flight."""
        self._entries.clear()
        for key in list(self._locks):
            self._discard_idle_lock(key)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def applies_request_timeout(self) -> bool:
        """Whether the upstream provider times its own requests."""
        return bool(getattr(self._provider, "applies_request_timeout", False))

    async def start(self) -> None:
        """Start the periodic sweep task."""
        if self._sweep_task is not None and not self._sweep_task.done():
            logger.warning("Venue cache sweeper already running")
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Started venue cache sweeper (every {self.sweep_interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the periodic sweep task."""
        if self._sweep_task and not self._sweep_task.done():
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            logger.info("Stopped venue cache sweeper")
        self._sweep_task = None

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            await self.sweep()

    async def __aenter__(self) -> VenueCache:
        await self.start()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        await self.stop()
