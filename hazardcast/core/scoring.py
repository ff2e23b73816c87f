"""Multi-factor crowding scorer.

Blends five signals into a single 0-100 crowding level for one cluster at
a forecast instant:

- time of day: reports in the forecast hour relative to the daily average
- day of week: reports on the forecast weekday relative to a uniform week
- weather impact: share of high-severity reports
- active zones: hazard zones whose center lies within 1 km of the cluster
- density: average reports per day over the lookback window

Also derives a trend label (last 7 days versus older activity) and a
confidence score proportional to report density.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Sequence

from hazardcast.core.errors import InvalidParameter
from hazardcast.core.geo import haversine_km
from hazardcast.core.models import (
    Cluster,
    CrowdingPrediction,
    HazardZone,
    PredictionFactors,
    Report,
    Severity,
    Trend,
)
from hazardcast.core.patterns import TimePatterns, build_time_patterns, day_of_week, hour_of

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# Zones within this distance (km) of a cluster center count as nearby.
ZONE_RADIUS_KM = 1.0
# Each nearby zone adds this much to the active-zones factor (capped at 100).
ZONE_IMPACT_STEP = 20

# Trend compares the last TREND_WINDOW_MS of activity against everything older.
TREND_WINDOW_MS = 7 * DAY_MS
TREND_UP_RATIO = 1.2
TREND_DOWN_RATIO = 0.8


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(value, high))


@dataclass(frozen=True)
class FactorWeights:
    time_of_day: float = 0.25
    day_of_week: float = 0.20
    weather: float = 0.15
    active_zones: float = 0.25
    density: float = 0.15


DEFAULT_WEIGHTS = FactorWeights()


@dataclass(frozen=True)
class FactorScores:
    """Unrounded factor values, each nominally on a 0-100 scale.

    ``time_of_day`` and ``day_of_week`` are not capped and can exceed 100
    for strongly peaked clusters; the blended level is clamped instead.
    """
    time_of_day: float
    day_of_week: float
    weather: float
    active_zones: float
    density: float

    def blend(self, weights: FactorWeights = DEFAULT_WEIGHTS) -> int:
        raw = (
            self.time_of_day * weights.time_of_day
            + self.day_of_week * weights.day_of_week
            + self.weather * weights.weather
            + self.active_zones * weights.active_zones
            + self.density * weights.density
        )
        return round_half_up(clamp(raw))


def nearby_zones(center: tuple[float, float], zones: Sequence[HazardZone],
                 radius_km: float = ZONE_RADIUS_KM) -> list[HazardZone]:
    """Zones with a center within ``radius_km`` of ``center`` (lng, lat)."""
    return [
        z for z in zones
        if z.center is not None
        and haversine_km(center[1], center[0], z.center[1], z.center[0]) <= radius_km
    ]


def compute_factors(
    cluster: Cluster,
    patterns: TimePatterns,
    zones: Sequence[HazardZone],
    days_analyzed: int,
    predicted_ms: int,
    tz: tzinfo = timezone.utc,
    zone_radius_km: float = ZONE_RADIUS_KM,
) -> tuple[FactorScores, int]:
    """Return the raw factor scores and the number of nearby zones."""
    hour_bucket = patterns.hour_bucket(hour_of(predicted_ms, tz))
    day_bucket = patterns.day_bucket(day_of_week(predicted_ms, tz))

    total = cluster.size
    avg_per_day = total / days_analyzed

    # Bucket counts are subsets of total, so the divisors are non-zero here.
    time_of_day = (hour_bucket.count / avg_per_day) * 100 if hour_bucket.count > 0 else 0.0
    day_of_week_ = (day_bucket.count / (total / 7)) * 100 if day_bucket.count > 0 else 0.0

    high_count = sum(1 for r in cluster.members if r.severity is Severity.HIGH)
    weather = (high_count / total) * 100

    zone_count = len(nearby_zones(cluster.center, zones, zone_radius_km))
    active_zones = min(zone_count * ZONE_IMPACT_STEP, 100)

    density = min(avg_per_day * 10, 100)

    scores = FactorScores(
        time_of_day=time_of_day,
        day_of_week=day_of_week_,
        weather=weather,
        active_zones=active_zones,
        density=density,
    )
    return scores, zone_count


def compute_trend(members: Sequence[Report], now_ms: int) -> Trend:
    """Compare the last 7 days of reports against older ones.

    With no older reports, any recent activity counts as increasing.
    """
    cutoff = now_ms - TREND_WINDOW_MS
    recent = sum(1 for r in members if r.created_at_ms > cutoff)
    older = len(members) - recent

    if recent > older * TREND_UP_RATIO:
        return Trend.INCREASING
    if recent < older * TREND_DOWN_RATIO:
        return Trend.DECREASING
    return Trend.STABLE


def compute_confidence(total_reports: int, days_analyzed: int) -> int:
    return int(clamp(round_half_up(total_reports / days_analyzed * 10)))


def score_cluster(
    cluster: Cluster,
    zones: Sequence[HazardZone],
    days_analyzed: int,
    prediction_hours: int,
    now_ms: int,
    *,
    tz: tzinfo = timezone.utc,
    weights: FactorWeights = DEFAULT_WEIGHTS,
    zone_radius_km: float = ZONE_RADIUS_KM,
) -> CrowdingPrediction:
    """Score one cluster for the instant ``prediction_hours`` after ``now_ms``."""
    if not (days_analyzed > 0 and math.isfinite(days_analyzed)):
        raise InvalidParameter(f"days_analyzed must be positive and finite, got {days_analyzed}")

    predicted_ms = now_ms + prediction_hours * HOUR_MS
    patterns = build_time_patterns(cluster.members, tz)
    scores, zone_count = compute_factors(
        cluster, patterns, zones, days_analyzed, predicted_ms, tz, zone_radius_km,
    )
    avg_per_day = cluster.size / days_analyzed

    return CrowdingPrediction(
        location=cluster.center,
        area_name=cluster.label,
        crowding_level=scores.blend(weights),
        confidence=compute_confidence(cluster.size, days_analyzed),
        trend=compute_trend(cluster.members, now_ms),
        predicted_for_ms=predicted_ms,
        based_on_days=days_analyzed,
        factors=PredictionFactors(
            historical_reports=math.floor(avg_per_day * 10 + 0.5) / 10,
            time_of_day=round_half_up(scores.time_of_day),
            day_of_week=round_half_up(scores.day_of_week),
            weather_impact=round_half_up(scores.weather),
            active_zones=zone_count,
        ),
    )
