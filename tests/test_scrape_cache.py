import asyncio
import os
import sys
from datetime import date

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import ScrapeTarget, StationConfig
from core.models import DayEntry, ScrapedSource, TempPair
from core.scrape_cache import ScrapeCache


TARGET_DATE = date(2026, 10, 18)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _station(key: str = "london", targets=None) -> StationConfig:
    if targets is None:
        targets = (ScrapeTarget("bbc", "BBC Weather", "https://www.bbc.com/weather/2643743"),)
    return StationConfig(
        key=key,
        icao_id="EGLL",
        name="London",
        display_name="LONDON",
        latitude=51.4775,
        longitude=-0.4614,
        timezone="Europe/London",
        unit="C",
        adapters=(),
        scrape_targets=targets,
    )


def _source(temp_c: float) -> ScrapedSource:
    return ScrapedSource(
        id="scraped_bbc_d0",
        name="BBC Weather",
        url="https://www.bbc.com/weather/2643743",
        days=(DayEntry(day=0, temp=TempPair.from_c(temp_c)),),
    )


class CountingScrape:
    def __init__(self, delay: float = 0.0, fail: bool = False):
        self.calls = []
        self.delay = delay
        self.fail = fail

    async def __call__(self, station, day_offset, target_date):
        self.calls.append((station.key, day_offset, target_date))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("search API down")
        return [_source(18.0 + len(self.calls))]


def test_entry_is_served_until_ttl_then_repopulated() -> None:
    clock = FakeClock()
    scrape = CountingScrape()
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=clock)
    station = _station()

    async def run():
        first = await cache.resolve(station, 0, TARGET_DATE)
        clock.now += 299.9
        second = await cache.resolve(station, 0, TARGET_DATE)
        clock.now = 1000.0 + 300
        third = await cache.resolve(station, 0, TARGET_DATE)
        return first, second, third

    first, second, third = asyncio.run(run())

    assert first == second == [_source(19.0)]
    assert third == [_source(20.0)]
    assert len(scrape.calls) == 2


def test_key_includes_day_offset_and_date() -> None:
    scrape = CountingScrape()
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=FakeClock())
    station = _station()

    async def run():
        await cache.resolve(station, 0, TARGET_DATE)
        await cache.resolve(station, 1, TARGET_DATE)
        await cache.resolve(station, 0, date(2026, 10, 19))
        await cache.resolve(station, 0, TARGET_DATE)

    asyncio.run(run())

    assert len(scrape.calls) == 3
    assert len(cache) == 3


def test_concurrent_resolves_share_one_scrape_pass() -> None:
    scrape = CountingScrape(delay=0.05)
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=FakeClock())
    station = _station()

    async def run():
        return await asyncio.gather(*(cache.resolve(station, 0, TARGET_DATE) for _ in range(5)))

    results = asyncio.run(run())

    assert len(scrape.calls) == 1
    assert all(r == [_source(19.0)] for r in results)


def test_cancelled_waiter_does_not_cancel_shared_pass() -> None:
    scrape = CountingScrape(delay=0.05)
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=FakeClock())
    station = _station()

    async def run():
        impatient = asyncio.ensure_future(cache.resolve(station, 0, TARGET_DATE))
        patient = asyncio.ensure_future(cache.resolve(station, 0, TARGET_DATE))
        await asyncio.sleep(0.01)
        impatient.cancel()
        return await patient

    result = asyncio.run(run())

    assert result == [_source(19.0)]
    assert len(scrape.calls) == 1


def test_failed_population_is_empty_and_expires_normally() -> None:
    clock = FakeClock()
    scrape = CountingScrape(fail=True)
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=clock)
    station = _station()

    async def run():
        first = await cache.resolve(station, 0, TARGET_DATE)
        again = await cache.resolve(station, 0, TARGET_DATE)
        scrape.fail = False
        clock.now += 300
        recovered = await cache.resolve(station, 0, TARGET_DATE)
        return first, again, recovered

    first, again, recovered = asyncio.run(run())

    assert first == [] and again == []
    assert recovered == [_source(20.0)]
    assert len(scrape.calls) == 2


def test_station_without_targets_skips_cache() -> None:
    scrape = CountingScrape()
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=FakeClock())

    result = asyncio.run(cache.resolve(_station(targets=()), 0, TARGET_DATE))

    assert result == []
    assert scrape.calls == []
    assert len(cache) == 0


def test_invalidate_forces_new_pass() -> None:
    scrape = CountingScrape()
    cache = ScrapeCache(scrape, ttl_seconds=300, clock=FakeClock())
    station = _station()

    async def run():
        await cache.resolve(station, 0, TARGET_DATE)
        cache.invalidate()
        await cache.resolve(station, 0, TARGET_DATE)

    asyncio.run(run())

    assert len(scrape.calls) == 2
