"""Geospatial helpers shared across routing modules."""

from __future__ import annotations

import math

import osmnx as ox
from shapely.geometry import LineString, Point

Coordinate = tuple[float, float]  # (lat, lon)

EARTH_RADIUS_M = 6_371_000.0
# Decimal places kept in node keys (~1.1 m at the equator).
NODE_KEY_PRECISION = 5
DEFAULT_SPEED_KMH = 30.0


def great_circle_meters(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Return the great-circle distance between two lat/lon points in meters."""
    return float(
        ox.distance.great_circle(lat1, lon1, lat2, lon2, earth_radius=EARTH_RADIUS_M),
    )


def distance(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between two `(lat, lon)` tuples."""
    return great_circle_meters(a[0], a[1], b[0], b[1])


def node_key(coord: Coordinate) -> str:
    """Return the stable node identifier for a coordinate."""
    # `+ 0.0` folds -0.0 into 0.0.
    lat = round(coord[0], NODE_KEY_PRECISION) + 0.0
    lon = round(coord[1], NODE_KEY_PRECISION) + 0.0
    return f"{lat:.{NODE_KEY_PRECISION}f},{lon:.{NODE_KEY_PRECISION}f}"


def project_onto_segment(
    point: Coordinate,
    seg_a: Coordinate,
    seg_b: Coordinate,
) -> Coordinate:
    """Return the point of segment `[seg_a, seg_b]` closest to `point`.

    Latitude and longitude are treated as planar coordinates, which is only
    accurate over the short spans used for snapping. The projection is
    clamped to the segment, so points beyond either end map onto that end.
    """
    if seg_a == seg_b:
        return seg_a

    # Shapely works in (x, y) = (lon, lat).
    line = LineString([(seg_a[1], seg_a[0]), (seg_b[1], seg_b[0])])
    along = line.project(Point(point[1], point[0]))
    if along <= 0:
        return seg_a
    if along >= line.length:
        return seg_b
    projected = line.interpolate(along)
    return (float(projected.y), float(projected.x))


def format_distance(meters: float) -> str:
    """Render a distance as whole meters or kilometers with one decimal."""
    if meters >= 1000:  # noqa: PLR2004
        return f"{meters / 1000:.1f} km"
    return f"{_round_half_up(meters)} m"


def estimate_duration(meters: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> str:
    """Return a human readable travel time at a constant average speed."""
    hours = meters / 1000 / speed_kmh
    total_minutes = _round_half_up(hours * 60)

    if total_minutes < 1:
        return "<1 min"
    if total_minutes < 60:  # noqa: PLR2004
        return f"{total_minutes} min"

    h, m = divmod(total_minutes, 60)
    return f"{h}h {m}min" if m else f"{h}h"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
