"""Prediction service statistics.

Tracks in-memory counters of queries served, per query type.
No framework dependencies.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

QUERY_TYPES = ("general", "hourly", "specific")


@dataclass
class QueryCounters:
    """Counters for one query type."""
    requests: int = 0
    results: int = 0
    empty: int = 0
    last_duration_ms: float = 0.0


class PredictionStats:
    """Thread-safe counters for prediction queries.

    A query is "empty" when it completed but produced nothing useful: no
    significant hotspot, no report near the requested point, or no cluster
    within range of a point lookup.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()

        self.invalid_requests: int = 0
        self.errors: int = 0
        self._queries: dict[str, QueryCounters] = {t: QueryCounters() for t in QUERY_TYPES}

    def record_query(self, query_type: str, results: int, duration_ms: float) -> None:
        """Record a completed query and how many results it returned."""
        with self._lock:
            counters = self._queries.setdefault(query_type, QueryCounters())
            counters.requests += 1
            counters.results += results
            counters.last_duration_ms = duration_ms
            if results == 0:
                counters.empty += 1

    def record_invalid(self) -> None:
        with self._lock:
            self.invalid_requests += 1

    def record_error(self) -> None:
        with self._lock:
            self.errors += 1

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        with self._lock:
            queries = {
                name: {
                    "requests": c.requests,
                    "results": c.results,
                    "empty": c.empty,
                    "last_duration_ms": round(c.last_duration_ms, 2),
                }
                for name, c in self._queries.items()
            }
            return {
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "requests_total": sum(c.requests for c in self._queries.values()),
                "invalid_requests": self.invalid_requests,
                "errors": self.errors,
                "queries": queries,
            }
