# Load environment variables FIRST (before any other imports)
from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Silence verbose loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logger = logging.getLogger("web_server")

import config
from config import MAX_DAY_OFFSET
from core.aggregator import Aggregator
from core.errors import UnknownCityError


def create_app(aggregator_factory: Callable[[], Aggregator] = Aggregator) -> FastAPI:
    """Build the API; one Aggregator (HTTP client + scrape cache) per process."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        aggregator = aggregator_factory()
        app.state.aggregator = aggregator
        logger.info("Aggregator ready for %d cities", len(aggregator.stations))
        try:
            yield
        finally:
            await aggregator.aclose()

    app = FastAPI(title="TempTerminal", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(UnknownCityError)
    async def unknown_city_handler(request: Request, exc: UnknownCityError):
        return JSONResponse(status_code=400, content={"error": "Unknown city", "city": exc.city})

    @app.get("/api/all/{city}")
    async def get_all_sources(request: Request, city: str, day: int = Query(0, ge=0, le=MAX_DAY_OFFSET)):
        """Aggregate report for one city and day offset (0=today, 1=tomorrow, 2=day after)."""
        report = await request.app.state.aggregator.aggregate(city, day)
        return report.to_dict()

    @app.get("/api/config")
    def get_config(request: Request):
        """List of configured cities."""
        stations = request.app.state.aggregator.stations
        return {
            "cities": [
                {"key": key, "name": s.name, "displayName": s.display_name, "unit": s.unit}
                for key, s in stations.items()
            ]
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
