"""Helpers for expanding graph node paths into route legs."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import pairwise
from typing import TYPE_CHECKING, Hashable, Sequence

from georah.geo import (
    DEFAULT_SPEED_KMH,
    Coordinate,
    distance,
    estimate_duration,
    format_distance,
)
from georah.graph.build_graph import node_coordinate

if TYPE_CHECKING:
    import networkx as nx

    from georah.server.graph.snap import SnapResult


@dataclass(slots=True)
class RouteLeg:
    """A drawable route with its aggregate length and travel time."""

    path: list[Coordinate]
    distance_m: float
    formatted_distance: str
    duration: str

    def to_dict(self) -> dict:
        """Return the JSON shape consumed by the mobile client."""
        return {
            "path": [{"latitude": lat, "longitude": lon} for lat, lon in self.path],
            "distance": self.distance_m,
            "formattedDistance": self.formatted_distance,
            "duration": self.duration,
        }


@dataclass(slots=True)
class RouteResult:
    """Main route plus an optional alternative."""

    main: RouteLeg | None
    alternative: RouteLeg | None = None

    def to_dict(self) -> dict:  # noqa: D102
        return {
            "main": self.main.to_dict() if self.main else None,
            "alternative": self.alternative.to_dict() if self.alternative else None,
        }


def assemble(
    graph: nx.MultiDiGraph,
    path_nodes: Sequence[Hashable] | None,
    start_pin: Coordinate,
    start_snap: SnapResult,
    end_snap: SnapResult,
    end_pin: Coordinate,
    speed_kmh: float = DEFAULT_SPEED_KMH,
) -> RouteLeg | None:
    """Stitch pins, snap points and path nodes into one route leg.

    `path_nodes` is expected in search output order, from goal back to start.
    The distance also counts the stretch between each pin and its snap point.
    """
    if not path_nodes:
        return None

    road = [node_coordinate(graph, node) for node in reversed(path_nodes)]
    path = [start_pin, start_snap.point, *road, end_snap.point, end_pin]

    total = path_distance(path)
    return RouteLeg(
        path=path,
        distance_m=total,
        formatted_distance=format_distance(total),
        duration=estimate_duration(total, speed_kmh),
    )


def path_distance(coords: Sequence[Coordinate]) -> float:
    """Return the summed great-circle length of a polyline."""
    return sum(distance(a, b) for a, b in pairwise(coords))
