"""HazardCast — core internal data models.

These are plain dataclasses with no framework dependencies.
JSON records are converted to/from these at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def score(self) -> int:
        """Numeric weight used for aggregate scoring."""
        return _SEVERITY_SCORES[self]


_SEVERITY_SCORES = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class Report:
    id: str
    lng: float
    lat: float
    severity: Severity
    created_at_ms: int
    description: str = ""

    @property
    def location(self) -> tuple[float, float]:
        return (self.lng, self.lat)


@dataclass(frozen=True)
class HazardZone:
    id: str = ""
    type: str = ""
    center: tuple[float, float] | None = None  # (lng, lat)


@dataclass
class Cluster:
    center: tuple[float, float]  # (lng, lat)
    label: str
    members: list[Report] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class TimeBucket:
    count: int = 0
    severity_sum: int = 0

    def add(self, report: Report) -> None:
        self.count += 1
        self.severity_sum += report.severity.score


@dataclass(frozen=True)
class PredictionFactors:
    historical_reports: float  # reports per day, one decimal
    time_of_day: int
    day_of_week: int
    weather_impact: int
    active_zones: int

    def to_dict(self) -> dict:
        return {
            "historical_reports": self.historical_reports,
            "time_of_day": self.time_of_day,
            "day_of_week": self.day_of_week,
            "weather_impact": self.weather_impact,
            "active_zones": self.active_zones,
        }


@dataclass(frozen=True)
class CrowdingPrediction:
    location: tuple[float, float]  # (lng, lat)
    area_name: str
    crowding_level: int
    confidence: int
    trend: Trend
    predicted_for_ms: int
    based_on_days: int
    factors: PredictionFactors

    def to_dict(self) -> dict:
        return {
            "location": [round(self.location[0], 6), round(self.location[1], 6)],
            "area_name": self.area_name,
            "crowding_level": self.crowding_level,
            "confidence": self.confidence,
            "trend": self.trend.value,
            "predicted_for_ms": self.predicted_for_ms,
            "based_on_days": self.based_on_days,
            "factors": self.factors.to_dict(),
        }


@dataclass(frozen=True)
class HourlyPoint:
    hour: int
    crowding_level: int
    confidence: int

    def to_dict(self) -> dict:
        return {
            "hour": self.hour,
            "crowding_level": self.crowding_level,
            "confidence": self.confidence,
        }
