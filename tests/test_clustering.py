"""Tests for seed-anchored report clustering."""

from __future__ import annotations

import pytest

from hazardcast.core.clustering import cluster_by_location
from hazardcast.core.errors import InvalidParameter

# 0.004 degrees of latitude is ~0.445 km; 0.008 is ~0.890 km.
RADIUS_KM = 0.45


@pytest.fixture
def abc(make_report):
    a = make_report(lng=0, lat=0, id="A")
    b = make_report(lng=0, lat=0.004, id="B")
    c = make_report(lng=0, lat=0.008, id="C")
    return a, b, c


def _ids(clusters):
    return [[r.id for r in c.members] for c in clusters]


def test_members_tested_against_seed(abc):
    a, b, c = abc
    # A seeds; B is in range of A, C is not (even though C is in range of B).
    assert _ids(cluster_by_location([a, b, c], RADIUS_KM)) == [["A", "B"], ["C"]]


def test_grouping_depends_on_order(abc):
    a, b, c = abc
    assert _ids(cluster_by_location([c, b, a], RADIUS_KM)) == [["C", "B"], ["A"]]
    # B in the middle reaches both ends.
    assert _ids(cluster_by_location([b, a, c], RADIUS_KM)) == [["B", "A", "C"]]


def test_centroid_not_used_for_membership(make_report):
    a = make_report(lng=0, lat=0, id="A")
    b = make_report(lng=0, lat=0.004, id="B")
    # ~0.500 km from A but only ~0.278 km from the A/B centroid.
    c = make_report(lng=0, lat=0.0045, id="C")
    assert _ids(cluster_by_location([a, b, c], RADIUS_KM)) == [["A", "B"], ["C"]]


def test_center_is_member_mean(make_report):
    reports = [
        make_report(lng=105.850, lat=21.030),
        make_report(lng=105.851, lat=21.031),
        make_report(lng=105.852, lat=21.035),
    ]
    [cluster] = cluster_by_location(reports, 1.0)
    assert cluster.center == pytest.approx((105.851, 21.032))
    assert cluster.size == 3


def test_deterministic(make_report):
    reports = [make_report(lat=21.03 + i * 0.003, lng=105.85 + (i % 3) * 0.002) for i in range(12)]
    first = cluster_by_location(reports, 0.5)
    second = cluster_by_location(reports, 0.5)
    assert [c.size for c in first] == [c.size for c in second]
    assert [c.center for c in first] == [c.center for c in second]
    assert sum(c.size for c in first) == len(reports)


def test_every_report_lands_in_exactly_one_cluster(make_report):
    reports = [make_report(lat=21.03 + i * 0.002) for i in range(20)]
    clusters = cluster_by_location(reports, 0.5)
    ids = [r.id for c in clusters for r in c.members]
    assert sorted(ids) == sorted(r.id for r in reports)
    assert all(c.size >= 1 for c in clusters)


def test_label_from_seed_description(make_report):
    seed = make_report(description="Flooded underpass near the central market entrance")
    other = make_report(description="Second report")
    [cluster] = cluster_by_location([seed, other], 0.5)
    assert cluster.label == "Flooded underpass near the cen"
    assert len(cluster.label) == 30


def test_label_defaults_to_unknown_area(make_report):
    [cluster] = cluster_by_location([make_report()], 0.5)
    assert cluster.label == "Unknown Area"


def test_empty_input():
    assert cluster_by_location([], 0.5) == []


@pytest.mark.parametrize("radius", [0, -1.0, float("nan")])
def test_invalid_radius(make_report, radius):
    with pytest.raises(InvalidParameter):
        cluster_by_location([make_report()], radius)
