"""Routable graph builder for road polylines."""

from __future__ import annotations

import logging
from itertools import pairwise
from typing import TYPE_CHECKING, Any, Iterable, Mapping

import networkx as nx
from shapely.errors import ShapelyError
from shapely.geometry import LineString

from georah.geo import Coordinate, distance, node_key

if TYPE_CHECKING:
    from georah.roads import RoadRecord

# region Types & Configuration

Line = list[Coordinate]

LOGGER = logging.getLogger(__name__)
LINE_TYPES = frozenset({"LineString", "MultiLineString"})
MIN_LINE_COORDS = 2

# endregion Types & Configuration


# region API


def build_graph(roads: Iterable[RoadRecord]) -> nx.MultiDiGraph:
    """Return a weighted graph linking every consecutive pair of road points.

    Each segment is stored as two directed links with the same haversine
    weight. Records whose geometry cannot be read are skipped.
    """
    graph = nx.MultiDiGraph()
    segments = 0
    skipped = 0

    for index, road in enumerate(roads):
        try:
            lines = road_lines(road)
        except ValueError as exc:
            skipped += 1
            LOGGER.warning("Skipping road #%d (%s): %s", index, _road_label(road), exc)
            continue

        for line in lines:
            for start, end in pairwise(line):
                if add_segment(graph, start, end):
                    segments += 1

    graph.graph["segments"] = segments
    graph.graph["skipped_roads"] = skipped
    LOGGER.info(
        "Graph built with %s nodes / %s links from %s segments (%s roads skipped)",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        segments,
        skipped,
    )
    return graph


def add_segment(graph: nx.MultiDiGraph, start: Coordinate, end: Coordinate) -> bool:
    """Link two coordinates in both directions; return False for a zero step."""
    u = _ensure_node(graph, start)
    v = _ensure_node(graph, end)
    if u == v:
        return False

    weight = distance(start, end)
    graph.add_edge(u, v, weight=weight)
    graph.add_edge(v, u, weight=weight)
    return True


def node_coordinate(graph: nx.MultiDiGraph, node: str) -> Coordinate:
    """Return the stored `(lat, lon)` of a graph node."""
    data = graph.nodes[node]
    return (data["lat"], data["lng"])


# endregion API


# region Geometry to graph conversion


def road_lines(road: RoadRecord) -> list[Line]:
    """Return the `(lat, lon)` polylines of a GeoJSON road record.

    Parts of a ``MultiLineString`` with fewer than two positions are dropped.
    Raises ``ValueError`` when the record has no usable line geometry.
    """
    geometry = road.get("geometry") if isinstance(road, Mapping) else None
    if not isinstance(geometry, Mapping):
        raise ValueError("missing geometry")

    geom_type = geometry.get("type")
    if geom_type not in LINE_TYPES:
        msg = f"unsupported geometry type {geom_type!r}"
        raise ValueError(msg)

    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, (list, tuple)):
        raise ValueError("malformed coordinates (expected a list of positions)")
    parts = coordinates if geom_type == "MultiLineString" else [coordinates]

    lines: list[Line] = []
    for part in parts:
        if not isinstance(part, (list, tuple)):
            msg = f"malformed coordinates (line part {part!r})"
            raise ValueError(msg)
        if len(part) < MIN_LINE_COORDS:
            continue
        try:
            parsed = LineString(part)
        except (TypeError, ValueError, ShapelyError) as exc:
            msg = f"malformed coordinates ({exc})"
            raise ValueError(msg) from exc
        # GeoJSON stores (lon, lat); the graph works in (lat, lon).
        lines.append([(float(vertex[1]), float(vertex[0])) for vertex in parsed.coords])

    if not lines:
        raise ValueError("geometry has no line with two or more points")
    return lines


def _ensure_node(graph: nx.MultiDiGraph, coord: Coordinate) -> str:
    """Return the node key for a coordinate, creating the node if necessary."""
    key = node_key(coord)
    if key not in graph:
        graph.add_node(key, lat=coord[0], lng=coord[1])
    return key


# endregion Geometry to graph conversion


# region Utility helpers


def _road_label(road: Any) -> str:  # noqa: ANN401
    """Best-effort human label for log lines about a road record."""
    if not isinstance(road, Mapping):
        return type(road).__name__
    properties = road.get("properties")
    if isinstance(properties, Mapping):
        for key in ("name", "osm_id", "ref"):
            value = properties.get(key)
            if value is not None:
                return str(value)
    return "unnamed"


# endregion Utility helpers
