"""Report clustering — groups nearby incident reports into hotspots.

Uses a seed-anchored spatial grouping: reports are visited in input order,
and each report not yet assigned opens a new cluster. Every other unassigned
report within ``radius_km`` of that *seed* joins it. The reference point is
never moved while members are added, so clusters are not transitively
complete: two reports within range of a third may end up apart depending on
which one is visited first. Results are reproducible for a fixed ordering.

The scan is a full pairwise pass per seed, O(n^2) in the number of reports
inside the lookback window. That bounds practical window length and volume
for real-time use.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from hazardcast.core.errors import InvalidParameter
from hazardcast.core.geo import haversine_km
from hazardcast.core.models import Cluster, Report

log = structlog.get_logger()

# Default grouping radius (kilometers) for the general forecast.
CLUSTER_RADIUS_KM = 0.5

# Cluster labels are taken from the seed report's description.
LABEL_MAX_CHARS = 30
UNKNOWN_AREA = "Unknown Area"


def _label_for(seed: Report) -> str:
    return seed.description[:LABEL_MAX_CHARS] if seed.description else UNKNOWN_AREA


def _centroid(members: Sequence[Report]) -> tuple[float, float]:
    lng = sum(r.lng for r in members) / len(members)
    lat = sum(r.lat for r in members) / len(members)
    return (lng, lat)


def cluster_by_location(reports: Sequence[Report], radius_km: float = CLUSTER_RADIUS_KM) -> list[Cluster]:
    """Group reports into clusters anchored on their seed report.

    Clusters are returned in seed-encounter order. Each cluster's ``center``
    is the mean of its member coordinates, computed once after membership is
    frozen; it is never used to re-test membership.
    """
    if not radius_km > 0:
        raise InvalidParameter(f"radius_km must be positive, got {radius_km}")

    clusters: list[Cluster] = []
    processed: set[str] = set()

    for seed in reports:
        if seed.id in processed:
            continue

        members = [seed]
        for other in reports:
            if other.id == seed.id or other.id in processed:
                continue
            if haversine_km(seed.lat, seed.lng, other.lat, other.lng) <= radius_km:
                members.append(other)
                processed.add(other.id)

        processed.add(seed.id)
        clusters.append(Cluster(center=_centroid(members), label=_label_for(seed), members=members))

    log.debug("clusters_built", reports=len(reports), clusters=len(clusters),
              radius_km=radius_km)
    return clusters
