"""
TempTerminal - Search Scraper (scrape adapter)
Looks up each forecast publisher through the Brave Search web API and pulls a
forecast high out of the result snippets.

Only ever invoked through core.scrape_cache.ScrapeCache: the search API is
rate limited, so targets are queried one at a time with a fixed pause between
them.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date
from typing import Awaitable, Callable, List, Optional

import httpx
from bs4 import BeautifulSoup

import config
from config import ScrapeTarget, StationConfig
from core.errors import ProviderParseError
from core.models import DayEntry, ScrapedSource, Source, TempPair
from core.units import celsius_to_fahrenheit, fahrenheit_to_celsius

logger = logging.getLogger("search_scraper")

PROVIDER = "search"

DAY_LABELS = ("Today", "Tomorrow", "Day After")

_NUMBER = r"(-?\d+(?:\.\d+)?)"

# Tried top-down on the same text, first match wins. Explicit high/max phrasing
# is more precise than a bare degree marker, which may be a low or a current reading.
TEMPERATURE_PATTERNS = (
    re.compile(r"\bhigh\s+(?:of\s+)?" + _NUMBER),
    re.compile(r"\bmax(?:imum)?\s+(?:of\s+)?" + _NUMBER),
    re.compile(_NUMBER + r"\s?°?\s?/\s?-?\d+(?:\.\d+)?\s?°"),
    re.compile(_NUMBER + r"\s?°"),
)


def extract_temperature(text: str) -> Optional[float]:
    """Return the first temperature found by the prioritized patterns, if any."""
    if not text:
        return None
    lowered = text.lower()
    for pattern in TEMPERATURE_PATTERNS:
        match = pattern.search(lowered)
        if match:
            return float(match.group(1))
    return None


def correct_unit(value: float, unit: str) -> float:
    """
    Reinterpret values that look like the wrong unit for the station.

    Heuristic: >40 on a Celsius station is taken as Fahrenheit, <32 on a
    Fahrenheit station is taken as Celsius. A genuine 41C heatwave reading
    is misread by this rule.
    """
    if unit == "C" and value > 40:
        return fahrenheit_to_celsius(value)
    if unit == "F" and value < 32:
        return celsius_to_fahrenheit(value)
    return value


def snippet_text(result: dict) -> str:
    """Title + description of one search hit, with highlight markup stripped."""
    raw = f"{result.get('description') or ''} {result.get('title') or ''}"
    return " ".join(BeautifulSoup(raw, "html.parser").get_text(" ").split())


def build_query(target: ScrapeTarget, station: StationConfig, day_offset: int, target_date: date) -> str:
    label = DAY_LABELS[day_offset] if 0 <= day_offset < len(DAY_LABELS) else f"+{day_offset}"
    return f"{target.name} {station.display_name} forecast high max temperature {label} {target_date.isoformat()}"


class SearchScraper:
    """Runs the sequential scrape pass for one station/day."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        delay_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.api_key = config.BRAVE_SEARCH_API_KEY if api_key is None else api_key
        self.delay_seconds = config.SCRAPE_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.timeout_seconds = config.SCRAPE_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self._sleep = sleep

    async def search(self, query: str) -> List[dict]:
        response = await self.client.get(
            config.BRAVE_SEARCH_URL,
            params={"q": query, "count": config.SCRAPE_RESULTS_PER_QUERY},
            headers={"Accept": "application/json", "X-Subscription-Token": self.api_key},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderParseError(PROVIDER, f"invalid JSON: {e}") from e
        web = data.get("web") if isinstance(data, dict) else None
        if web is not None and not isinstance(web, dict):
            raise ProviderParseError(PROVIDER, f"unexpected web block: {type(web).__name__}")
        results = web.get("results") if web else None
        return results if isinstance(results, list) else []

    async def scrape_target(
        self, station: StationConfig, target: ScrapeTarget, day_offset: int, target_date: date
    ) -> Optional[Source]:
        results = await self.search(build_query(target, station, day_offset, target_date))
        for result in results:
            if not isinstance(result, dict):
                continue
            value = extract_temperature(snippet_text(result))
            if value is None:
                continue
            value = correct_unit(value, station.unit)
            return ScrapedSource(
                id=f"scraped_{target.id}_d{day_offset}",
                name=target.name,
                url=target.url,
                days=(DayEntry(day=day_offset, temp=TempPair.from_unit(value, station.unit)),),
            )
        return None

    async def scrape(self, station: StationConfig, day_offset: int, target_date: date) -> List[Source]:
        """
        Query every scrape target in registry order.

        The pause is charged between targets, never before the first. A target
        that fails or yields no match is skipped, not retried.
        """
        if not station.scrape_targets:
            return []
        if not self.api_key:
            logger.warning("BRAVE_SEARCH_API_KEY not set; skipping scrape for %s", station.key)
            return []

        scraped: List[Source] = []
        for idx, target in enumerate(station.scrape_targets):
            if idx > 0 and self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            try:
                source = await self.scrape_target(station, target, day_offset, target_date)
            except (httpx.HTTPError, ProviderParseError) as e:
                logger.warning("Scrape fail: %s (%s): %s", target.name, station.key, e)
                continue
            if source is not None:
                scraped.append(source)

        logger.info(
            "Scrape %s d%d %s: %d/%d targets matched",
            station.key, day_offset, target_date, len(scraped), len(station.scrape_targets),
        )
        return scraped
