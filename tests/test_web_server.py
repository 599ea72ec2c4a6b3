import os
import sys
from datetime import date, datetime, timezone

from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import STATIONS
from core.errors import UnknownCityError
from core.models import ModelSource, TempPair
from core.report import assemble
from web_server import create_app


class FakeAggregator:
    def __init__(self):
        self.stations = STATIONS
        self.calls = []
        self.closed = False

    async def aggregate(self, city, day_offset=0):
        self.calls.append((city, day_offset))
        station = STATIONS.get(city.lower())
        if station is None:
            raise UnknownCityError(city)
        source = ModelSource(
            id="model_ECMWF",
            name="ECMWF",
            model="ecmwf_ifs025",
            series={date(2026, 10, 18): TempPair.from_c(16.0), date(2026, 10, 19): TempPair.from_c(17.0)},
        )
        return assemble(
            station,
            [source],
            day_offset,
            target_date=date(2026, 10, 18),
            fetched_at=datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
        )

    async def aclose(self):
        self.closed = True


def test_all_sources_route_returns_report() -> None:
    fake = FakeAggregator()
    with TestClient(create_app(lambda: fake)) as client:
        response = client.get("/api/all/london", params={"day": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "london"
    assert body["station"] == "EGLL"
    assert body["displayName"] == "LONDON"
    assert body["unit"] == "C"
    assert body["average"] == 17.0
    assert body["sources"][0]["primary"] == 17.0
    assert body["fetchedAt"] == "2026-10-18T12:00:00+00:00"
    assert fake.calls == [("london", 1)]
    assert fake.closed is True


def test_unknown_city_is_a_client_error() -> None:
    with TestClient(create_app(FakeAggregator)) as client:
        response = client.get("/api/all/atlantis")

    assert response.status_code == 400
    assert response.json()["error"] == "Unknown city"


def test_day_outside_range_is_rejected() -> None:
    fake = FakeAggregator()
    with TestClient(create_app(lambda: fake)) as client:
        response = client.get("/api/all/london", params={"day": 5})

    assert response.status_code == 422
    assert fake.calls == []


def test_config_lists_cities() -> None:
    with TestClient(create_app(FakeAggregator)) as client:
        response = client.get("/api/config")

    assert response.status_code == 200
    cities = response.json()["cities"]
    assert [c["key"] for c in cities] == ["london", "paris", "dallas", "miami"]
    assert cities[2] == {"key": "dallas", "name": "Dallas Love Field", "displayName": "DALLAS", "unit": "F"}
