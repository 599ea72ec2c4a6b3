"""
TempTerminal - Configuration
Central configuration for weather stations, provider endpoints and runtime knobs.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# ============================================================================
# STATION CONFIGURATION
# ============================================================================

ADAPTER_METAR = "metar"            # live instrument observation
ADAPTER_IEM = "iem"                # recorded daily max so far
ADAPTER_NWS = "nws"                # NWS grid forecast
ADAPTER_OPEN_METEO = "open_meteo"  # multi-model daily maxima


@dataclass(frozen=True)
class ScrapeTarget:
    """A forecast publisher looked up through the search API."""
    id: str
    name: str
    url: str


@dataclass(frozen=True)
class NwsGrid:
    office: str
    x: int
    y: int


@dataclass(frozen=True)
class StationConfig:
    """Weather station configuration with provider metadata."""
    key: str
    icao_id: str
    name: str
    display_name: str
    latitude: float
    longitude: float
    timezone: str
    unit: str  # "C" or "F"
    adapters: Tuple[str, ...]
    models: Tuple[Tuple[str, str], ...] = ()  # (open-meteo model id, label)
    scrape_targets: Tuple[ScrapeTarget, ...] = ()
    live_sensor_id: Optional[str] = None
    nws_grid: Optional[NwsGrid] = None
    iem_station: Optional[str] = None
    iem_network: Optional[str] = None


_EUROPE_MODELS = (
    ("ecmwf_ifs025", "ECMWF"),
    ("gfs_seamless", "GFS"),
    ("meteofrance_arome_france_hd", "AROME"),
    ("ukmo_seamless", "UKMO"),
)

_US_MODELS = (
    ("ecmwf_ifs025", "ECMWF"),
    ("gfs_seamless", "GFS"),
)

STATIONS: Dict[str, StationConfig] = {
    "london": StationConfig(
        key="london",
        icao_id="EGLL",
        name="London City Airport",
        display_name="LONDON",
        latitude=51.4775,
        longitude=-0.4614,
        timezone="Europe/London",
        unit="C",
        adapters=(ADAPTER_OPEN_METEO,),
        models=_EUROPE_MODELS,
        scrape_targets=(
            ScrapeTarget("metoffice", "Met Office", "https://www.metoffice.gov.uk/weather/forecast/gcpvj0v07"),
            ScrapeTarget("wunderground", "Weather Underground", "https://www.wunderground.com/weather/gb/london"),
            ScrapeTarget("bbc", "BBC Weather", "https://www.bbc.com/weather/2643743"),
            ScrapeTarget("accu", "AccuWeather", "https://www.accuweather.com/en/gb/london/ec4a-2/weather-forecast/328328"),
        ),
    ),
    "paris": StationConfig(
        key="paris",
        icao_id="LFPG",
        name="Paris Charles de Gaulle",
        display_name="PARIS",
        latitude=49.0097,
        longitude=2.5479,
        timezone="Europe/Paris",
        unit="C",
        adapters=(ADAPTER_OPEN_METEO,),
        models=_EUROPE_MODELS,
        scrape_targets=(
            ScrapeTarget("meteo", "Météo-France", "https://meteofrance.com/previsions-meteo-france/paris/75000"),
        ),
    ),
    "dallas": StationConfig(
        key="dallas",
        icao_id="KDAL",
        name="Dallas Love Field",
        display_name="DALLAS",
        latitude=32.8471,
        longitude=-96.8518,
        timezone="America/Chicago",
        unit="F",
        adapters=(ADAPTER_METAR, ADAPTER_IEM, ADAPTER_NWS, ADAPTER_OPEN_METEO),
        models=_US_MODELS,
        scrape_targets=(
            ScrapeTarget("weather_chan", "Weather Channel", "https://weather.com/weather/today/l/Dallas+TX"),
        ),
        live_sensor_id="KDAL",
        nws_grid=NwsGrid(office="FWD", x=85, y=106),
        iem_station="DAL",
        iem_network="TX_ASOS",
    ),
    "miami": StationConfig(
        key="miami",
        icao_id="KMIA",
        name="Miami Intl Airport",
        display_name="MIAMI",
        latitude=25.7932,
        longitude=-80.2906,
        timezone="America/New_York",
        unit="F",
        adapters=(ADAPTER_METAR, ADAPTER_IEM, ADAPTER_NWS, ADAPTER_OPEN_METEO),
        models=_US_MODELS,
        scrape_targets=(
            ScrapeTarget("weather_chan", "Weather Channel", "https://weather.com/weather/today/l/Miami+FL"),
        ),
        live_sensor_id="KMIA",
        nws_grid=NwsGrid(office="MFL", x=76, y=52),
        iem_station="MIA",
        iem_network="FL_ASOS",
    ),
}


# ============================================================================
# API ENDPOINTS
# ============================================================================

# NOAA Aviation Weather Center
NOAA_METAR_URL = "https://aviationweather.gov/api/data/metar"

# NOAA/NWS grid forecasts
NWS_API_URL = "https://api.weather.gov"

# Iowa Environmental Mesonet daily summaries
IEM_DAILY_URL = "https://mesonet.agron.iastate.edu/api/1/daily.json"

# Open-Meteo (multi-model daily maxima)
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# Brave Search web API (scrape adapter)
BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"

# ============================================================================
# RUNTIME CONFIGURATION
# ============================================================================

BRAVE_SEARCH_API_KEY = os.environ.get("BRAVE_SEARCH_API_KEY", "")

USER_AGENT = os.environ.get("TEMPTERMINAL_USER_AGENT", "TempTerminal/2.0")

# Per-adapter timeout (seconds)
ADAPTER_TIMEOUT_SECONDS = float(os.environ.get("TEMPTERMINAL_ADAPTER_TIMEOUT", "15"))

# Per search request timeout (seconds)
SCRAPE_TIMEOUT_SECONDS = float(os.environ.get("TEMPTERMINAL_SCRAPE_TIMEOUT", "10"))

# Pause between consecutive scrape targets (search API rate limit)
SCRAPE_DELAY_SECONDS = float(os.environ.get("TEMPTERMINAL_SCRAPE_DELAY", "1.5"))

# Results requested per search query
SCRAPE_RESULTS_PER_QUERY = 5

# Scrape cache time-to-live (seconds)
SCRAPE_CACHE_TTL_SECONDS = float(os.environ.get("TEMPTERMINAL_CACHE_TTL", "300"))

# Supported day offsets: today, tomorrow, day after
MAX_DAY_OFFSET = 2

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3001"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
