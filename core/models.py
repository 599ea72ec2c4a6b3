"""
TempTerminal - Source Records

Every provider contribution is normalized into one of five frozen dataclasses.
The `kind` tag is a class attribute, so the union can be discriminated with
isinstance() or by reading `source.kind`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from core.units import celsius_to_fahrenheit, fahrenheit_to_celsius


@dataclass(frozen=True)
class TempPair:
    """A temperature in both units. One field is always derived from the other."""
    temp_c: Optional[float]
    temp_f: Optional[float]

    @classmethod
    def from_c(cls, temp_c: Optional[float]) -> "TempPair":
        return cls(temp_c=temp_c, temp_f=celsius_to_fahrenheit(temp_c))

    @classmethod
    def from_f(cls, temp_f: Optional[float]) -> "TempPair":
        return cls(temp_c=fahrenheit_to_celsius(temp_f), temp_f=temp_f)

    @classmethod
    def from_unit(cls, value: Optional[float], unit: str) -> "TempPair":
        return cls.from_f(value) if unit == "F" else cls.from_c(value)

    def in_unit(self, unit: str) -> Optional[float]:
        return self.temp_f if unit == "F" else self.temp_c

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"temp_c": self.temp_c, "temp_f": self.temp_f}


@dataclass(frozen=True)
class DayEntry:
    """One day of a forecast-shaped source (day 0 = today in station time)."""
    day: int
    temp: TempPair
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, **self.temp.to_dict(), "description": self.description}


@dataclass(frozen=True)
class LiveSource:
    """Instantaneous instrument observation. Day 0 only."""
    kind: ClassVar[str] = "live"

    id: str
    name: str
    temp: TempPair
    observed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            **self.temp.to_dict(),
            "observedAt": self.observed_at.isoformat() if self.observed_at else None,
        }


@dataclass(frozen=True)
class RecordedSource:
    """Running daily maximum recorded so far. Day 0 only."""
    kind: ClassVar[str] = "recorded"

    id: str
    name: str
    temp: TempPair
    recorded_on: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            **self.temp.to_dict(),
            "date": self.recorded_on.isoformat() if self.recorded_on else None,
        }


@dataclass(frozen=True)
class ForecastSource:
    """Structured daytime forecast, up to three ordered days."""
    kind: ClassVar[str] = "forecast"

    id: str
    name: str
    days: Tuple[DayEntry, ...] = ()
    issued_at: Optional[datetime] = None

    def entry_for(self, day_offset: int) -> Optional[DayEntry]:
        return next((e for e in self.days if e.day == day_offset), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            "days": [e.to_dict() for e in self.days],
            "issuedAt": self.issued_at.isoformat() if self.issued_at else None,
        }


@dataclass(frozen=True)
class ModelSource:
    """Daily maxima of one numerical model, keyed by local calendar date."""
    kind: ClassVar[str] = "model"

    id: str
    name: str
    model: str
    series: Dict[date, TempPair] = field(default_factory=dict)

    @property
    def dates(self) -> Tuple[date, ...]:
        return tuple(sorted(self.series))

    def pair_at(self, position: int) -> Optional[TempPair]:
        dates = self.dates
        if position < 0 or position >= len(dates):
            return None
        return self.series[dates[position]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "series": [{"date": d.isoformat(), **self.series[d].to_dict()} for d in self.dates],
        }


@dataclass(frozen=True)
class ScrapedSource:
    """Forecast high extracted from search results for one scrape target."""
    kind: ClassVar[str] = "scraped"

    id: str
    name: str
    url: str
    days: Tuple[DayEntry, ...] = ()

    def entry_for(self, day_offset: int) -> Optional[DayEntry]:
        return next((e for e in self.days if e.day == day_offset), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "days": [e.to_dict() for e in self.days],
        }


Source = Union[LiveSource, RecordedSource, ForecastSource, ModelSource, ScrapedSource]

SOURCE_KINDS = ("live", "recorded", "forecast", "model", "scraped")
