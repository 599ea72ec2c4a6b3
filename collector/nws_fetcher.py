"""
TempTerminal - NWS Fetcher (grid-forecast adapter)
Fetches the api.weather.gov gridpoint forecast and keeps the daytime highs
for today, tomorrow and the day after.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

import httpx

from config import MAX_DAY_OFFSET, NWS_API_URL, StationConfig
from core.errors import ProviderParseError
from core.models import DayEntry, ForecastSource, Source, TempPair

logger = logging.getLogger("nws_fetcher")

PROVIDER = "nws"


def _parse_iso(value) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_daytime_periods(periods: list, tz: ZoneInfo, today) -> List[DayEntry]:
    """
    Map daytime periods to day offsets relative to `today` (station local date).

    After sunset the feed starts with "Tonight", so the first daytime period is
    tomorrow; entries are indexed by date, never by position, and missing days
    stay missing.
    """
    entries: List[DayEntry] = []
    seen = set()
    for period in periods:
        if not isinstance(period, dict) or not period.get("isDaytime"):
            continue
        start = _parse_iso(period.get("startTime"))
        temp = period.get("temperature")
        if start is None or temp is None:
            continue
        day = (start.astimezone(tz).date() - today).days
        if day < 0 or day > MAX_DAY_OFFSET or day in seen:
            continue
        if isinstance(temp, dict):
            temp = temp.get("value")
            if temp is None:
                continue
        unit = "C" if str(period.get("temperatureUnit", "F")).upper().startswith("C") else "F"
        seen.add(day)
        entries.append(
            DayEntry(
                day=day,
                temp=TempPair.from_unit(round(float(temp), 1), unit),
                description=str(period.get("shortForecast") or ""),
            )
        )
    entries.sort(key=lambda e: e.day)
    return entries


async def fetch_nws_forecast(
    station: StationConfig, day_offset: int, client: httpx.AsyncClient, today: Optional[date] = None
) -> List[Source]:
    """Return one `forecast` source with up to three daytime entries."""
    grid = station.nws_grid
    if grid is None:
        return []

    url = f"{NWS_API_URL}/gridpoints/{grid.office}/{grid.x},{grid.y}/forecast"
    response = await client.get(url, headers={"Accept": "application/geo+json"})
    response.raise_for_status()

    try:
        payload = response.json()
    except ValueError as e:
        raise ProviderParseError(PROVIDER, f"invalid JSON: {e}") from e

    props = payload.get("properties") if isinstance(payload, dict) else None
    periods = props.get("periods") if isinstance(props, dict) else None
    if not isinstance(periods, list):
        raise ProviderParseError(PROVIDER, "missing properties.periods")

    tz = ZoneInfo(station.timezone)
    entries = parse_daytime_periods(periods, tz, today or datetime.now(tz).date())
    if not entries:
        logger.info("NWS %s/%s,%s: no daytime periods", grid.office, grid.x, grid.y)
        return []

    return [
        ForecastSource(
            id=f"forecast_nws_{grid.office}",
            name="NWS Forecast",
            days=tuple(entries),
            issued_at=_parse_iso(props.get("updateTime") or props.get("updated")),
        )
    ]
