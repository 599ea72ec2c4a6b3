"""
TempTerminal - Scrape Cache

Keyed TTL store in front of the scrape adapter with single-flight
deduplication: concurrent resolves of the same (city, day offset, date) key
share one scrape pass.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from config import SCRAPE_CACHE_TTL_SECONDS, StationConfig
from core.models import Source

logger = logging.getLogger("scrape_cache")

CacheKey = Tuple[str, int, date]
ScrapeFn = Callable[[StationConfig, int, date], Awaitable[List[Source]]]


@dataclass
class CacheEntry:
    timestamp: float
    sources: List[Source] = field(default_factory=list)


class ScrapeCache:
    """
    TTL cache with single-flight population.

    `scrape` performs the actual (slow, rate-limited) pass. `clock` returns
    seconds and is injectable so expiry can be driven from tests.
    """

    def __init__(
        self,
        scrape: ScrapeFn,
        ttl_seconds: float = SCRAPE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._scrape = scrape
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._inflight: Dict[CacheKey, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(station: StationConfig, day_offset: int, target_date: date) -> CacheKey:
        return (station.key, day_offset, target_date)

    def get(self, key: CacheKey) -> Optional[List[Source]]:
        """Return a live entry's sources, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return list(entry.sources)

    def invalidate(self, key: Optional[CacheKey] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    async def resolve(self, station: StationConfig, day_offset: int, target_date: date) -> List[Source]:
        if not station.scrape_targets:
            return []

        key = self.make_key(station, day_offset, target_date)
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return cached

        # No await between the lookup and registration, so the check-and-set
        # is atomic on the event loop.
        task = self._inflight.get(key)
        if task is None:
            logger.debug("cache miss %s", key)
            task = asyncio.ensure_future(self._populate(key, station, day_offset, target_date))
            self._inflight[key] = task
            task.add_done_callback(lambda _t, k=key: self._inflight.pop(k, None))
        else:
            logger.debug("joining in-flight scrape %s", key)

        # Shielded so one caller giving up does not cancel the shared pass.
        sources = await asyncio.shield(task)
        return list(sources)

    async def _populate(
        self, key: CacheKey, station: StationConfig, day_offset: int, target_date: date
    ) -> List[Source]:
        try:
            sources = list(await self._scrape(station, day_offset, target_date))
        except Exception as e:
            # Stored empty with a normal timestamp: it expires like any other entry.
            logger.warning("Scrape pass failed for %s: %s", key, e)
            sources = []
        self._entries[key] = CacheEntry(timestamp=self._clock(), sources=sources)
        return sources
