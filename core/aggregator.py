"""
TempTerminal - Aggregation Engine

Fans out every applicable provider adapter for a city/day, waits for all of
them to settle, adds the cached scrape results and assembles the report.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

import httpx

import config
from config import MAX_DAY_OFFSET, STATIONS, StationConfig
from collector import ADAPTERS, Adapter, SearchScraper, guarded_fetch
from core.errors import InvalidDayOffsetError, UnknownCityError
from core.models import Source
from core.report import AggregateReport, assemble
from core.scrape_cache import ScrapeCache

logger = logging.getLogger("aggregator")


def build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.ADAPTER_TIMEOUT_SECONDS,
        follow_redirects=True,
        headers={"User-Agent": config.USER_AGENT},
    )


class Aggregator:
    """
    Owns the shared HTTP client and the scrape cache for its lifetime.

    Use as an async context manager (or call `aclose()`); a client passed in
    by the caller is left open.
    """

    def __init__(
        self,
        stations: Optional[Mapping[str, StationConfig]] = None,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[ScrapeCache] = None,
        adapters: Optional[Mapping[str, Adapter]] = None,
        adapter_timeout: Optional[float] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.stations: Mapping[str, StationConfig] = STATIONS if stations is None else stations
        self._owns_client = client is None
        self.client = build_client() if client is None else client
        self.adapters: Dict[str, Adapter] = dict(ADAPTERS if adapters is None else adapters)
        self.adapter_timeout = config.ADAPTER_TIMEOUT_SECONDS if adapter_timeout is None else adapter_timeout
        self._now = now
        if cache is None:
            cache = ScrapeCache(SearchScraper(self.client).scrape)
        self.cache = cache

    async def __aenter__(self) -> "Aggregator":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def resolve_station(self, city: str) -> StationConfig:
        station = self.stations.get((city or "").strip().lower())
        if station is None:
            raise UnknownCityError(city)
        return station

    def target_date_for(self, station: StationConfig, day_offset: int):
        local_today = self._now().astimezone(ZoneInfo(station.timezone)).date()
        return local_today + timedelta(days=day_offset)

    async def collect(self, station: StationConfig, day_offset: int) -> List[Source]:
        """Run every applicable adapter concurrently; failures thin the list."""
        names = []
        for name in station.adapters:
            if name in self.adapters:
                names.append(name)
            else:
                logger.warning("Station %s lists unknown adapter %r", station.key, name)

        today = self.target_date_for(station, 0)
        results = await asyncio.gather(
            *(
                guarded_fetch(
                    name, self.adapters[name], station, day_offset, self.client, self.adapter_timeout, today=today
                )
                for name in names
            )
        )
        sources: List[Source] = []
        for name, batch in zip(names, results):
            logger.debug("%s %s d%d: %d sources", name, station.key, day_offset, len(batch))
            sources.extend(batch)
        return sources

    async def aggregate(self, city: str, day_offset: int = 0) -> AggregateReport:
        """
        Build the aggregate report for a city and day offset (0-2).

        Raises UnknownCityError for cities outside the registry; every provider
        failure is absorbed and only reduces the number of sources.
        """
        station = self.resolve_station(city)
        if not isinstance(day_offset, int) or not 0 <= day_offset <= MAX_DAY_OFFSET:
            raise InvalidDayOffsetError(day_offset)

        target_date = self.target_date_for(station, day_offset)
        sources = await self.collect(station, day_offset)
        sources.extend(await self.cache.resolve(station, day_offset, target_date))

        report = assemble(station, sources, day_offset, target_date=target_date, fetched_at=self._now())
        logger.info(
            "%s d%d: %d sources, avg=%s, spread=%s",
            station.key,
            day_offset,
            len(report.sources),
            f"{report.average:.1f}" if report.average is not None else "--",
            report.spread_class or "n/a",
        )
        return report

    async def aggregate_all(self, day_offset: int = 0) -> Dict[str, AggregateReport]:
        keys = list(self.stations)
        reports = await asyncio.gather(*(self.aggregate(key, day_offset) for key in keys))
        return dict(zip(keys, reports))
