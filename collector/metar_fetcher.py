"""
TempTerminal - METAR Fetcher (live adapter)
Fetches the latest METAR from NOAA Aviation Weather Center and reports the
instantaneous temperature as a `live` source.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

import httpx

from config import NOAA_METAR_URL, StationConfig
from collector.metar.temperature_parser import decode_temperature
from core.errors import ProviderParseError
from core.models import LiveSource, Source, TempPair

logger = logging.getLogger("metar_fetcher")

PROVIDER = "metar"


def _parse_obs_time(raw) -> Optional[datetime]:
    try:
        if isinstance(raw, (int, float)):
            return datetime.fromtimestamp(raw, tz=timezone.utc)
        if isinstance(raw, str):
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (ValueError, TypeError, OSError):
        return None
    return None


async def fetch_metar(
    station: StationConfig, day_offset: int, client: httpx.AsyncClient, today: Optional[date] = None
) -> List[Source]:
    """
    Fetch the latest observation for the station's live sensor.

    Only meaningful for today; other offsets return no sources without a request.
    """
    if day_offset != 0 or not station.live_sensor_id:
        return []

    response = await client.get(
        NOAA_METAR_URL,
        params={"ids": station.live_sensor_id, "format": "json"},
    )
    response.raise_for_status()

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderParseError(PROVIDER, f"invalid JSON: {e}") from e
    if not data:
        logger.info("No METAR returned for %s", station.live_sensor_id)
        return []
    if not isinstance(data, list) or not isinstance(data[0], dict):
        raise ProviderParseError(PROVIDER, "unexpected payload shape")

    obs = data[0]
    temp_c, origin = decode_temperature(obs.get("rawOb", ""), obs.get("temp"))
    if temp_c is None:
        raise ProviderParseError(PROVIDER, f"no temperature in METAR for {station.live_sensor_id}")

    logger.debug("METAR %s: %.1fC from %s", station.live_sensor_id, temp_c, origin)
    return [
        LiveSource(
            id=f"live_{station.live_sensor_id}",
            name=f"METAR {station.live_sensor_id}",
            temp=TempPair.from_c(temp_c),
            observed_at=_parse_obs_time(obs.get("obsTime")),
        )
    ]
