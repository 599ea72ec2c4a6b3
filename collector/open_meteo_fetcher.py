"""
TempTerminal - Open-Meteo Fetcher (multi-model adapter)
One request per station covering every configured numerical model; the
response is split into one `model` source per model.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

import httpx

from config import MAX_DAY_OFFSET, OPEN_METEO_URL, StationConfig
from core.errors import ProviderParseError
from core.models import ModelSource, Source, TempPair

logger = logging.getLogger("open_meteo_fetcher")

PROVIDER = "open_meteo"


def _series_for(times: List[str], values: list) -> Dict[date, TempPair]:
    """
    Build the date -> pair series for one model.

    Trailing nulls are dropped so a short-range model ends up with a short
    series; interior nulls keep their date with an empty pair.
    """
    points: List[tuple] = []
    for idx, ts in enumerate(times):
        value = values[idx] if idx < len(values) else None
        try:
            day = date.fromisoformat(ts)
        except (TypeError, ValueError) as e:
            raise ProviderParseError(PROVIDER, f"bad date {ts!r}") from e
        points.append((day, value))

    while points and points[-1][1] is None:
        points.pop()

    return {
        day: TempPair.from_c(round(float(value), 1)) if value is not None else TempPair(None, None)
        for day, value in points
    }


def split_models(station: StationConfig, daily: dict) -> List[Source]:
    times = daily.get("time")
    if not isinstance(times, list):
        raise ProviderParseError(PROVIDER, "missing daily.time")

    sources: List[Source] = []
    for model_id, label in station.models:
        values: Optional[list] = daily.get(f"temperature_2m_max_{model_id}")
        if values is None and len(station.models) == 1:
            values = daily.get("temperature_2m_max")
        if not isinstance(values, list):
            logger.debug("Open-Meteo %s: no series for %s", station.key, model_id)
            continue
        series = _series_for(times, values)
        if not series:
            continue
        sources.append(
            ModelSource(
                id=f"model_{label}",
                name=label,
                model=model_id,
                series=series,
            )
        )
    return sources


async def fetch_open_meteo_models(
    station: StationConfig, day_offset: int, client: httpx.AsyncClient, today: Optional[date] = None
) -> List[Source]:
    """
    Fetch 3-day daily maxima for all of the station's models in one call.

    The full 3-day series is returned whatever the requested offset; the
    report picks the requested day.
    """
    if not station.models:
        return []

    params = {
        "latitude": station.latitude,
        "longitude": station.longitude,
        "daily": "temperature_2m_max",
        "models": ",".join(model_id for model_id, _ in station.models),
        "timezone": station.timezone,
        "forecast_days": MAX_DAY_OFFSET + 1,
    }
    response = await client.get(OPEN_METEO_URL, params=params)
    response.raise_for_status()

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderParseError(PROVIDER, f"invalid JSON: {e}") from e

    daily = data.get("daily") if isinstance(data, dict) else None
    if not isinstance(daily, dict):
        raise ProviderParseError(PROVIDER, "missing 'daily' block")

    sources = split_models(station, daily)
    logger.debug("Open-Meteo %s: %d/%d models", station.key, len(sources), len(station.models))
    return sources
