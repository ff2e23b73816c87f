"""Prediction queries — the entry points callers use.

Three read-only operations built on clustering, pattern extraction and
scoring:

- ``general_predictions``: ranked hotspots across all clusters
- ``hourly_profile``: 24-hour risk profile around an arbitrary point
- ``prediction_near``: forecast of the nearest cluster for a point and time

Every function takes ``now_ms`` explicitly and keeps no state between calls.
Data fetching is the caller's job; nothing here performs I/O.
"""

from __future__ import annotations

import math
from datetime import timezone, tzinfo
from typing import Sequence

import structlog

from hazardcast.core.clustering import CLUSTER_RADIUS_KM, cluster_by_location
from hazardcast.core.errors import InvalidParameter
from hazardcast.core.geo import distance_between, format_distance, haversine_km
from hazardcast.core.models import CrowdingPrediction, HazardZone, HourlyPoint, Report
from hazardcast.core.patterns import hour_of, to_datetime
from hazardcast.core.scoring import (
    DAY_MS,
    DEFAULT_WEIGHTS,
    HOUR_MS,
    FactorWeights,
    round_half_up,
    score_cluster,
)

log = structlog.get_logger()

DEFAULT_DAYS_TO_ANALYZE = 30
DEFAULT_PREDICTION_HOURS = 24
DEFAULT_QUERY_RADIUS_KM = 1.0

# Clusters at or below this level are not worth reporting.
MIN_CROWDING_LEVEL = 20

# Maps an average severity score (1-3) onto 0-100.
SEVERITY_TO_LEVEL = 33.33


def _check_days(days_analyzed: int) -> None:
    if not (days_analyzed > 0 and math.isfinite(days_analyzed)):
        raise InvalidParameter(f"days_analyzed must be positive and finite, got {days_analyzed}")


def _check_horizon(now_ms: int, prediction_hours: int, tz: tzinfo) -> None:
    """Reject horizons whose forecast instant is not a representable date."""
    try:
        to_datetime(now_ms + prediction_hours * HOUR_MS, tz)
    except (ValueError, OverflowError, OSError):
        raise InvalidParameter(f"prediction horizon of {prediction_hours}h is out of range") from None


def _check_radius(radius_km: float) -> None:
    if not radius_km > 0:
        raise InvalidParameter(f"radius_km must be positive, got {radius_km}")


def _check_location(location) -> tuple[float, float]:
    """Validate a (lng, lat) pair and return it as floats."""
    if location is None:
        raise InvalidParameter("location is required")
    try:
        lng, lat = (float(v) for v in location)
    except (TypeError, ValueError):
        raise InvalidParameter(f"location must be a (lng, lat) pair, got {location!r}") from None
    if not (math.isfinite(lng) and math.isfinite(lat)):
        raise InvalidParameter(f"location coordinates must be finite, got {location!r}")
    return (lng, lat)


def reports_in_window(reports: Sequence[Report], days_analyzed: int, now_ms: int) -> list[Report]:
    """Reports created within ``[now - days_analyzed, now]``, input order kept."""
    start_ms = now_ms - days_analyzed * DAY_MS
    return [r for r in reports if start_ms <= r.created_at_ms <= now_ms]


def general_predictions(
    reports: Sequence[Report],
    zones: Sequence[HazardZone],
    days_analyzed: int = DEFAULT_DAYS_TO_ANALYZE,
    prediction_hours: int = DEFAULT_PREDICTION_HOURS,
    *,
    now_ms: int,
    tz: tzinfo = timezone.utc,
    cluster_radius_km: float = CLUSTER_RADIUS_KM,
    min_crowding_level: int = MIN_CROWDING_LEVEL,
    weights: FactorWeights = DEFAULT_WEIGHTS,
) -> list[CrowdingPrediction]:
    """Forecast every hotspot ``prediction_hours`` ahead, highest level first.

    Clusters scoring ``min_crowding_level`` or less are dropped. Ties keep
    seed-encounter order.
    """
    _check_days(days_analyzed)
    _check_radius(cluster_radius_km)
    _check_horizon(now_ms, prediction_hours, tz)

    window = reports_in_window(reports, days_analyzed, now_ms)
    clusters = cluster_by_location(window, cluster_radius_km)

    predictions = []
    for cluster in clusters:
        prediction = score_cluster(
            cluster, zones, days_analyzed, prediction_hours, now_ms,
            tz=tz, weights=weights,
        )
        if prediction.crowding_level > min_crowding_level:
            predictions.append(prediction)

    predictions.sort(key=lambda p: p.crowding_level, reverse=True)

    log.info("predictions_generated", reports=len(window), clusters=len(clusters),
             significant=len(predictions), days=days_analyzed, hours=prediction_hours)
    return predictions


def hourly_profile(
    reports: Sequence[Report],
    location: tuple[float, float],
    radius_km: float = DEFAULT_QUERY_RADIUS_KM,
    days_analyzed: int = DEFAULT_DAYS_TO_ANALYZE,
    *,
    now_ms: int,
    tz: tzinfo = timezone.utc,
) -> list[HourlyPoint]:
    """Per-hour crowding level and confidence for reports near ``location``.

    Does not cluster: every report within ``radius_km`` counts. Day of week
    is ignored. Always returns 24 entries, hour 0 first.
    """
    lng, lat = _check_location(location)
    _check_radius(radius_km)
    _check_days(days_analyzed)

    nearby = [
        r for r in reports_in_window(reports, days_analyzed, now_ms)
        if haversine_km(lat, lng, r.lat, r.lng) <= radius_km
    ]

    counts = [0] * 24
    severity_sums = [0] * 24
    for report in nearby:
        hour = hour_of(report.created_at_ms, tz)
        counts[hour] += 1
        severity_sums[hour] += report.severity.score

    profile = []
    for hour in range(24):
        count = counts[hour]
        avg_severity = severity_sums[hour] / count if count else 0.0
        profile.append(HourlyPoint(
            hour=hour,
            crowding_level=min(round_half_up(avg_severity * SEVERITY_TO_LEVEL), 100),
            confidence=min(round_half_up(count / (days_analyzed / 24) * 100), 100),
        ))

    log.debug("hourly_profile_built", reports=len(nearby), radius_km=radius_km)
    return profile


def prediction_near(
    reports: Sequence[Report],
    zones: Sequence[HazardZone],
    location: tuple[float, float],
    target_ms: int,
    radius_km: float = DEFAULT_QUERY_RADIUS_KM,
    days_analyzed: int = DEFAULT_DAYS_TO_ANALYZE,
    *,
    now_ms: int,
    tz: tzinfo = timezone.utc,
    cluster_radius_km: float = CLUSTER_RADIUS_KM,
    min_crowding_level: int = MIN_CROWDING_LEVEL,
) -> CrowdingPrediction | None:
    """Forecast for the cluster nearest ``location`` at ``target_ms``.

    The horizon is ``target_ms - now_ms`` rounded to whole hours; targets
    more than half an hour in the past are rejected. The full general
    forecast is rerun for that horizon, so the result describes the nearest
    *cluster* within ``radius_km``, not the exact point. Returns None when
    no significant cluster is in range.
    """
    point = _check_location(location)
    _check_radius(radius_km)
    _check_days(days_analyzed)

    try:
        prediction_hours = round_half_up((target_ms - now_ms) / HOUR_MS)
    except OverflowError:
        raise InvalidParameter(f"target time {target_ms} is out of range") from None
    if prediction_hours < 0:
        raise InvalidParameter(
            f"target time is {-prediction_hours}h in the past; only future lookups are supported"
        )

    predictions = general_predictions(
        reports, zones, days_analyzed, prediction_hours,
        now_ms=now_ms, tz=tz,
        cluster_radius_km=cluster_radius_km,
        min_crowding_level=min_crowding_level,
    )

    closest: CrowdingPrediction | None = None
    min_distance = math.inf
    for prediction in predictions:
        distance = distance_between(point, prediction.location)
        if distance <= radius_km and distance < min_distance:
            min_distance = distance
            closest = prediction

    if closest is None:
        log.info("prediction_not_found", lng=point[0], lat=point[1], radius_km=radius_km,
                 candidates=len(predictions))
    else:
        log.info("prediction_found", area=closest.area_name,
                 distance=format_distance(min_distance),
                 crowding_level=closest.crowding_level)
    return closest
