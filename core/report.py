"""
TempTerminal - Report Assembler
Derives per-source display values for the requested day, the cross-source
average and the spread classification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from config import StationConfig
from core.models import (
    SOURCE_KINDS,
    ForecastSource,
    LiveSource,
    ModelSource,
    RecordedSource,
    ScrapedSource,
    Source,
    TempPair,
)
from core.units import convert, other_unit

SPREAD_TIGHT_MAX = 1.5
SPREAD_MEDIUM_MAX = 3.0


@dataclass(frozen=True)
class Reading:
    """What one source says about the requested day, in display order."""
    primary: Optional[float]
    secondary: Optional[float]


@dataclass
class AggregateReport:
    city: str
    station: str
    display_name: str
    unit: str
    day_offset: int
    sources: List[Source]
    readings: List[Reading]
    average: Optional[float]
    average_secondary: Optional[float]
    spread: Optional[float] = None
    spread_class: Optional[str] = None
    target_date: Optional[date] = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "station": self.station,
            "displayName": self.display_name,
            "unit": self.unit,
            "day": self.day_offset,
            "date": self.target_date.isoformat() if self.target_date else None,
            "sources": [
                {**s.to_dict(), "primary": r.primary, "secondary": r.secondary}
                for s, r in zip(self.sources, self.readings)
            ],
            "average": self.average,
            "averageSecondary": self.average_secondary,
            "spread": self.spread,
            "spreadClass": self.spread_class,
            "fetchedAt": self.fetched_at.isoformat(),
        }


def pair_for_day(source: Source, day_offset: int) -> Optional[TempPair]:
    """The temperature pair a source reports for `day_offset`, if any."""
    if isinstance(source, (LiveSource, RecordedSource)):
        return source.temp if day_offset == 0 else None
    if isinstance(source, (ForecastSource, ScrapedSource)):
        entry = source.entry_for(day_offset)
        return entry.temp if entry else None
    if isinstance(source, ModelSource):
        return source.pair_at(day_offset)
    raise TypeError(f"Unsupported source type: {type(source).__name__}")


def reading_for(source: Source, day_offset: int, unit: str) -> Reading:
    pair = pair_for_day(source, day_offset)
    if pair is None:
        return Reading(None, None)
    return Reading(primary=pair.in_unit(unit), secondary=pair.in_unit(other_unit(unit)))


def classify_spread(spread: float) -> str:
    if spread <= SPREAD_TIGHT_MAX:
        return "tight"
    if spread <= SPREAD_MEDIUM_MAX:
        return "medium"
    return "wide"


def _kind_rank(source: Source) -> int:
    return SOURCE_KINDS.index(source.kind)


def assemble(
    station: StationConfig,
    sources: Sequence[Source],
    day_offset: int,
    *,
    target_date: Optional[date] = None,
    fetched_at: Optional[datetime] = None,
) -> AggregateReport:
    """
    Build the report for one city/day.

    Sources are ordered by kind (live, recorded, forecast, model, scraped) for
    display; order within a kind is preserved.
    """
    ordered = sorted(sources, key=_kind_rank)
    readings = [reading_for(s, day_offset, station.unit) for s in ordered]
    values = [r.primary for r in readings if r.primary is not None]

    average = sum(values) / len(values) if values else None
    spread = spread_class = None
    if len(values) >= 2:
        spread = round(max(values) - min(values), 1)
        spread_class = classify_spread(spread)

    return AggregateReport(
        city=station.key,
        station=station.icao_id,
        display_name=station.display_name,
        unit=station.unit,
        day_offset=day_offset,
        sources=ordered,
        readings=readings,
        average=average,
        average_secondary=convert(average, station.unit),
        spread=spread,
        spread_class=spread_class,
        target_date=target_date,
        fetched_at=fetched_at or datetime.now(timezone.utc),
    )
