"""
TempTerminal - IEM Fetcher (recorded-max adapter)
Reads the running daily maximum from the Iowa Environmental Mesonet ASOS
daily summary for the station's local date.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

import httpx

from config import IEM_DAILY_URL, StationConfig
from core.errors import ProviderParseError
from core.models import RecordedSource, Source, TempPair

logger = logging.getLogger("iem_fetcher")

PROVIDER = "iem"


async def fetch_iem_daily_max(
    station: StationConfig, day_offset: int, client: httpx.AsyncClient, today: Optional[date] = None
) -> List[Source]:
    """Recorded max so far today (°F upstream). Other offsets have nothing recorded yet."""
    if day_offset != 0 or not (station.iem_station and station.iem_network):
        return []

    local_date = today or datetime.now(ZoneInfo(station.timezone)).date()
    response = await client.get(
        IEM_DAILY_URL,
        params={
            "station": station.iem_station,
            "network": station.iem_network,
            "date": local_date.isoformat(),
        },
    )
    response.raise_for_status()

    try:
        payload = response.json()
    except ValueError as e:
        raise ProviderParseError(PROVIDER, f"invalid JSON: {e}") from e

    rows = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(rows, list):
        raise ProviderParseError(PROVIDER, "missing 'data' list")

    row = next((r for r in rows if isinstance(r, dict) and r.get("date") == local_date.isoformat()), None)
    if row is None:
        logger.info("IEM %s: no summary yet for %s", station.iem_station, local_date)
        return []

    max_f = row.get("max_tmpf")
    if max_f is None:
        return []
    try:
        max_f = round(float(max_f), 1)
    except (TypeError, ValueError) as e:
        raise ProviderParseError(PROVIDER, f"bad max_tmpf {max_f!r}") from e

    return [
        RecordedSource(
            id=f"recorded_{station.iem_station}",
            name=f"IEM {station.icao_id} Max",
            temp=TempPair.from_f(max_f),
            recorded_on=local_date,
        )
    ]
