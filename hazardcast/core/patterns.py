"""Temporal pattern extraction.

Builds per-cluster histograms of report count and severity sum, keyed by
hour of day (0-23) and day of week (0 = Sunday ... 6 = Saturday). Raw counts
over the whole lookback window; no smoothing or decay.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Iterable

from hazardcast.core.models import Report, TimeBucket


def to_datetime(timestamp_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)


def hour_of(timestamp_ms: int, tz: tzinfo = timezone.utc) -> int:
    return to_datetime(timestamp_ms, tz).hour


def day_of_week(timestamp_ms: int, tz: tzinfo = timezone.utc) -> int:
    """Day of week with Sunday as 0."""
    return to_datetime(timestamp_ms, tz).isoweekday() % 7


@dataclass
class TimePatterns:
    hours: dict[int, TimeBucket] = field(default_factory=dict)
    days: dict[int, TimeBucket] = field(default_factory=dict)

    def hour_bucket(self, hour: int) -> TimeBucket:
        return self.hours.get(hour, TimeBucket())

    def day_bucket(self, day: int) -> TimeBucket:
        return self.days.get(day, TimeBucket())


def build_time_patterns(reports: Iterable[Report], tz: tzinfo = timezone.utc) -> TimePatterns:
    patterns = TimePatterns()
    for report in reports:
        dt = to_datetime(report.created_at_ms, tz)
        patterns.hours.setdefault(dt.hour, TimeBucket()).add(report)
        patterns.days.setdefault(dt.isoweekday() % 7, TimeBucket()).add(report)
    return patterns
