from __future__ import annotations

import math

import pytest

from georah.geo import (
    EARTH_RADIUS_M,
    distance,
    estimate_duration,
    format_distance,
    great_circle_meters,
    node_key,
    project_onto_segment,
)


def test_distance_is_zero_for_identical_points() -> None:
    assert distance((-15.7801, -47.9292), (-15.7801, -47.9292)) == 0


def test_distance_is_symmetric() -> None:
    a = (-15.7801, -47.9292)
    b = (-15.8, -47.85)
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_one_degree_of_longitude_on_equator() -> None:
    expected = EARTH_RADIUS_M * math.pi / 180
    assert great_circle_meters(0.0, 0.0, 0.0, 1.0) == pytest.approx(expected, rel=1e-9)


def test_node_key_rounds_to_five_decimals() -> None:
    assert node_key((12.345678, -45.0)) == "12.34568,-45.00000"


def test_nearby_points_share_a_node_key() -> None:
    assert node_key((0.100001, 0.200004)) == node_key((0.100004, 0.199996))
    assert node_key((-0.000001, 0.000001)) == node_key((0.0, 0.0))


def test_projection_inside_segment() -> None:
    lat, lon = project_onto_segment((0.001, 0.5), (0.0, 0.0), (0.0, 1.0))
    assert lat == pytest.approx(0.0, abs=1e-12)
    assert lon == pytest.approx(0.5)


@pytest.mark.parametrize(
    ("point", "expected"),
    [
        ((0.0, -0.3), (0.0, 0.0)),
        ((0.2, 1.7), (0.0, 1.0)),
    ],
)
def test_projection_is_clamped_to_segment_ends(point, expected) -> None:
    assert project_onto_segment(point, (0.0, 0.0), (0.0, 1.0)) == expected


def test_point_on_segment_projects_to_itself() -> None:
    a, b = (10.0, 20.0), (10.4, 20.8)
    on_segment = (10.1, 20.2)
    lat, lon = project_onto_segment(on_segment, a, b)
    assert lat == pytest.approx(on_segment[0])
    assert lon == pytest.approx(on_segment[1])


def test_projection_stays_within_segment_bounds() -> None:
    a, b = (-3.0, 4.0), (-2.5, 3.2)
    for point in [(-2.0, 5.0), (-2.9, 3.1), (-2.7, 3.7), (10.0, -10.0)]:
        lat, lon = project_onto_segment(point, a, b)
        assert min(a[0], b[0]) - 1e-12 <= lat <= max(a[0], b[0]) + 1e-12
        assert min(a[1], b[1]) - 1e-12 <= lon <= max(a[1], b[1]) + 1e-12


def test_degenerate_segment_returns_its_point() -> None:
    assert project_onto_segment((1.0, 1.0), (0.5, 0.5), (0.5, 0.5)) == (0.5, 0.5)


@pytest.mark.parametrize(
    ("meters", "label"),
    [
        (0, "0 m"),
        (999.4, "999 m"),
        (1000, "1.0 km"),
        (1549, "1.5 km"),
        (23456, "23.5 km"),
    ],
)
def test_format_distance(meters, label) -> None:
    assert format_distance(meters) == label


@pytest.mark.parametrize(
    ("meters", "label"),
    [
        (0, "<1 min"),
        (200, "<1 min"),
        (10_000, "20 min"),
        (30_000, "1h"),
        (45_000, "1h 30min"),
        (61_000, "2h 2min"),
    ],
)
def test_estimate_duration_at_default_speed(meters, label) -> None:
    assert estimate_duration(meters) == label


def test_estimate_duration_uses_custom_speed() -> None:
    assert estimate_duration(10_000, speed_kmh=60) == "10 min"
