"""Health check and monitoring endpoints."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter

from hazardcast.storage.file_storage import REPORTS_FILE, ZONES_FILE

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health() -> dict:
    """Basic health check."""
    from hazardcast.main import get_config, get_stats

    config = get_config()
    data_dir = Path(config.storage.base_dir)

    snapshot = get_stats().snapshot()
    return {
        "status": "ok",
        "version": "0.1.0",
        "uptime_seconds": snapshot["uptime_seconds"],
        "reports_available": (data_dir / REPORTS_FILE).exists(),
        "zones_available": (data_dir / ZONES_FILE).exists(),
    }


@router.get("/stats")
async def stats() -> dict:
    """Query counters per prediction type.

    Each entry under ``queries`` shows:
    - ``requests``: completed queries of that type
    - ``results``: predictions (or non-empty hourly buckets) returned
    - ``empty``: queries that produced nothing
    - ``last_duration_ms``: wall time of the most recent query
    """
    from hazardcast.main import get_stats

    return get_stats().snapshot()
