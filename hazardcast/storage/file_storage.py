"""File-based report source.

Reads records written by the dashboard's export job as JSON Lines:
- base_dir/reports.jsonl: one incident report per line
- base_dir/zones.jsonl: one active hazard zone per line

Report line:  {"id": "r1", "location": [lng, lat], "severity": "high",
               "created_at_ms": 1700000000000, "description": "..."}
Zone line:    {"id": "z1", "type": "flood", "center": [lng, lat] | null}

A missing file means no data. Blank lines are skipped.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from hazardcast.core.errors import StorageError
from hazardcast.core.models import HazardZone, Report, Severity

log = structlog.get_logger()

REPORTS_FILE = "reports.jsonl"
ZONES_FILE = "zones.jsonl"


def _parse_point(value) -> tuple[float, float]:
    lng, lat = value
    return (float(lng), float(lat))


def report_from_dict(data: dict) -> Report:
    """Build a Report from a JSON record. Raises KeyError/ValueError/TypeError."""
    lng, lat = _parse_point(data["location"])
    return Report(
        id=str(data["id"]),
        lng=lng,
        lat=lat,
        severity=Severity(data.get("severity", "low")),
        created_at_ms=int(data["created_at_ms"]),
        description=data.get("description") or "",
    )


def zone_from_dict(data: dict) -> HazardZone:
    center = data.get("center")
    return HazardZone(
        id=str(data.get("id", "")),
        type=data.get("type", ""),
        center=_parse_point(center) if center is not None else None,
    )


class FileReportSource:
    """ReportSource backed by JSON Lines files on disk."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)

    def _read_records(self, name: str) -> list[dict]:
        path = self._base_dir / name
        if not path.exists():
            log.debug("data_file_missing", path=str(path))
            return []

        records = []
        try:
            with open(path) as f:
                for line_no, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(json.loads(line))
                    except json.JSONDecodeError as e:
                        raise StorageError(f"{path}:{line_no}: invalid JSON ({e.msg})") from e
        except OSError as e:
            raise StorageError(f"cannot read {path}: {e}") from e
        return records

    async def fetch_reports(self, since_ms: int) -> list[Report]:
        """Reports created at or after ``since_ms``, in file order."""
        reports = []
        for i, record in enumerate(self._read_records(REPORTS_FILE)):
            try:
                report = report_from_dict(record)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise StorageError(f"{REPORTS_FILE} record {i}: malformed report ({e!r})") from e
            if report.created_at_ms >= since_ms:
                reports.append(report)
        log.debug("reports_loaded", count=len(reports), since_ms=since_ms)
        return reports

    async def fetch_active_zones(self) -> list[HazardZone]:
        zones = []
        for i, record in enumerate(self._read_records(ZONES_FILE)):
            try:
                zones.append(zone_from_dict(record))
            except (ValueError, TypeError, AttributeError) as e:
                raise StorageError(f"{ZONES_FILE} record {i}: malformed zone ({e!r})") from e
        log.debug("zones_loaded", count=len(zones))
        return zones
