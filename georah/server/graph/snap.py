"""Helpers for snapping arbitrary coordinates onto the road graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Hashable

from georah.geo import Coordinate, distance, project_onto_segment
from georah.graph.build_graph import node_coordinate

if TYPE_CHECKING:
    import networkx as nx

# Radius used to collect candidate nodes around the query point.
SEARCH_RADIUS_M = 3000.0
# Snaps farther than this from the query point are rejected.
SNAP_MAX_DISTANCE_M = 5000.0


@dataclass(slots=True)
class SnapResult:
    """Describes where an arbitrary coordinate meets the road graph."""

    point: Coordinate
    node_id: Hashable
    distance_m: float


def nearest_nodes(
    graph: nx.MultiDiGraph,
    point: Coordinate,
    radius_m: float = SEARCH_RADIUS_M,
) -> list[tuple[Hashable, float]]:
    """Return `(node, distance)` pairs for every node within `radius_m`.

    Nodes come back in graph insertion order.
    """
    candidates: list[tuple[Hashable, float]] = []
    for node, data in graph.nodes(data=True):
        dist = distance(point, (data["lat"], data["lng"]))
        if dist <= radius_m:
            candidates.append((node, dist))
    return candidates


def locate(
    graph: nx.MultiDiGraph,
    point: Coordinate,
    search_radius_m: float = SEARCH_RADIUS_M,
    max_snap_distance_m: float = SNAP_MAX_DISTANCE_M,
) -> SnapResult | None:
    """Project `point` onto the closest road segment near it.

    Only segments touching a node within `search_radius_m` are examined, so
    the radius must exceed the longest segment around the query point for the
    result to match a full scan. Returns ``None`` when nothing is in range.
    """
    best: SnapResult | None = None
    checked: set[tuple[Hashable, Hashable, int]] = set()

    for node, _ in nearest_nodes(graph, point, search_radius_m):
        node_coord = node_coordinate(graph, node)

        for _, linked, key in graph.out_edges(node, keys=True):
            if (node, linked, key) in checked:
                continue
            # Both directions of a segment are added together and share a key.
            checked.add((node, linked, key))
            checked.add((linked, node, key))

            linked_coord = node_coordinate(graph, linked)
            projection = project_onto_segment(point, node_coord, linked_coord)
            dist = distance(point, projection)
            if best is not None and dist >= best.distance_m:
                continue

            # Enter the graph from whichever segment end is closer to the snap.
            to_node = distance(projection, node_coord)
            to_linked = distance(projection, linked_coord)
            entry = node if to_node < to_linked else linked
            best = SnapResult(point=projection, node_id=entry, distance_m=dist)

    if best is None or best.distance_m > max_snap_distance_m:
        return None
    return best
