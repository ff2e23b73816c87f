"""Crowding prediction API endpoints.

This is the thin FastAPI adapter. It parses query parameters, fetches
reports and zones from the configured source, and calls the engine.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from hazardcast.core.engine import general_predictions, hourly_profile, prediction_near
from hazardcast.core.errors import InvalidParameter, StorageError
from hazardcast.core.scoring import DAY_MS

router = APIRouter(prefix="/api/v1")

log = structlog.get_logger()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@router.get("/predictions")
async def get_predictions(
    query_type: str = Query(default="general", alias="type"),
    days: int | None = Query(default=None),
    hours: int | None = Query(default=None),
    lat: float | None = Query(default=None),
    lng: float | None = Query(default=None),
    radius: float | None = Query(default=None),
    time_ms: int | None = Query(default=None, alias="time"),
) -> JSONResponse:
    """Return crowding predictions based on historical reports.

    ``type`` selects the query:
    - ``general``: ranked hotspots ``hours`` ahead
    - ``hourly``: 24-hour profile around ``lat``/``lng``
    - ``specific``: nearest hotspot to ``lat``/``lng`` at epoch-ms ``time``
    """
    from hazardcast.main import get_config, get_source, get_stats

    config = get_config().prediction
    source = get_source()
    stats = get_stats()

    if query_type not in ("general", "hourly", "specific"):
        stats.record_invalid()
        return _error("Invalid type parameter. Use: general, hourly, or specific", 400)

    days_analyzed = days if days is not None else config.days_to_analyze
    query_radius = radius if radius is not None else config.query_radius_km
    started = time.perf_counter()
    now_ms = int(time.time() * 1000)

    if query_type != "general" and (lat is None or lng is None):
        stats.record_invalid()
        return _error(f"Missing lat/lng parameters for {query_type} predictions", 400)
    if query_type == "specific" and time_ms is None:
        stats.record_invalid()
        return _error("Missing time parameter for specific predictions", 400)

    try:
        if days_analyzed <= 0:
            raise InvalidParameter(f"days must be positive, got {days_analyzed}")
        since_ms = now_ms - days_analyzed * DAY_MS
        reports = await source.fetch_reports(since_ms)

        if query_type == "general":
            prediction_hours = hours if hours is not None else config.prediction_hours
            zones = await source.fetch_active_zones()
            predictions = general_predictions(
                reports, zones, days_analyzed, prediction_hours,
                now_ms=now_ms, tz=config.tz,
                cluster_radius_km=config.cluster_radius_km,
                min_crowding_level=config.min_crowding_level,
            )
            body = {
                "predictions": [p.to_dict() for p in predictions],
                "generated_at_ms": now_ms,
                "days_analyzed": days_analyzed,
                "prediction_window": prediction_hours,
            }
            results = len(predictions)

        elif query_type == "hourly":
            profile = hourly_profile(
                reports, (lng, lat), query_radius, days_analyzed,
                now_ms=now_ms, tz=config.tz,
            )
            body = {
                "location": [lng, lat],
                "hourly_data": [p.to_dict() for p in profile],
                "generated_at_ms": now_ms,
                "days_analyzed": days_analyzed,
            }
            results = sum(1 for p in profile if p.confidence > 0)

        else:
            zones = await source.fetch_active_zones()
            prediction = prediction_near(
                reports, zones, (lng, lat), time_ms, query_radius, days_analyzed,
                now_ms=now_ms, tz=config.tz,
                cluster_radius_km=config.cluster_radius_km,
                min_crowding_level=config.min_crowding_level,
            )
            if prediction is None:
                stats.record_query(query_type, 0, (time.perf_counter() - started) * 1000)
                return _error("No prediction available for this location/time", 404)
            body = {"prediction": prediction.to_dict(), "generated_at_ms": now_ms}
            results = 1

    except InvalidParameter as e:
        stats.record_invalid()
        log.info("prediction_rejected", type=query_type, error=str(e))
        return _error(str(e), 400)
    except StorageError:
        stats.record_error()
        log.error("prediction_source_failed", type=query_type, exc_info=True)
        return _error("Failed to load report data", 500)
    except Exception:
        stats.record_error()
        log.error("prediction_failed", type=query_type, exc_info=True)
        return _error("Failed to generate predictions", 500)

    stats.record_query(query_type, results, (time.perf_counter() - started) * 1000)
    return JSONResponse(content=body)
