"""
TempTerminal - Collector Module
Provider adapters plus the guard that keeps their failures contained.
"""

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Dict, List, Optional

import httpx

from config import ADAPTER_IEM, ADAPTER_METAR, ADAPTER_NWS, ADAPTER_OPEN_METEO, StationConfig
from core.errors import ProviderError, ProviderParseError, ProviderTimeoutError, ProviderTransportError
from core.models import Source

from .iem_fetcher import fetch_iem_daily_max
from .metar_fetcher import fetch_metar
from .nws_fetcher import fetch_nws_forecast
from .open_meteo_fetcher import fetch_open_meteo_models
from .search_scraper import SearchScraper

__all__ = [
    "fetch_metar", "fetch_iem_daily_max", "fetch_nws_forecast", "fetch_open_meteo_models",
    "SearchScraper", "Adapter", "ADAPTERS", "guarded_fetch",
]

logger = logging.getLogger("collector")

# (station, day_offset, client, today); `today` is the station-local date
# resolved by the caller.
Adapter = Callable[[StationConfig, int, httpx.AsyncClient, Optional[date]], Awaitable[List[Source]]]

# Non-scrape adapters the aggregation engine fans out to.
ADAPTERS: Dict[str, Adapter] = {
    ADAPTER_METAR: fetch_metar,
    ADAPTER_IEM: fetch_iem_daily_max,
    ADAPTER_NWS: fetch_nws_forecast,
    ADAPTER_OPEN_METEO: fetch_open_meteo_models,
}


async def guarded_fetch(
    name: str,
    adapter: Adapter,
    station: StationConfig,
    day_offset: int,
    client: httpx.AsyncClient,
    timeout: float,
    today: Optional[date] = None,
) -> List[Source]:
    """
    Run one adapter under its own timeout.

    Any failure (timeout, transport, bad payload) is logged and turned into an
    empty contribution; nothing propagates to sibling adapters.
    """
    try:
        try:
            return list(await asyncio.wait_for(adapter(station, day_offset, client, today), timeout=timeout))
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(name, f"no response within {timeout:.1f}s") from e
        except httpx.HTTPError as e:
            raise ProviderTransportError(name, f"{type(e).__name__}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderParseError(name, f"{type(e).__name__}: {e}") from e
    except ProviderError as e:
        logger.warning("%s failed for %s: %s", name, station.key, e)
    except Exception as e:
        logger.exception("%s crashed for %s: %s", name, station.key, e)
    return []
