"""A* shortest-path search over the road graph."""

from __future__ import annotations

import math
from heapq import heappop, heappush
from itertools import count, pairwise
from typing import TYPE_CHECKING, Hashable, Mapping, Sequence

from georah.geo import distance
from georah.graph.build_graph import node_coordinate

if TYPE_CHECKING:
    import networkx as nx

EdgeKey = tuple[Hashable, Hashable, int]
WeightOverrides = Mapping[EdgeKey, float]


def find_path(
    graph: nx.MultiDiGraph,
    start: Hashable,
    goal: Hashable,
    weight_overrides: WeightOverrides | None = None,
) -> list[Hashable] | None:
    """Return the cheapest node sequence from `goal` back to `start`.

    Link costs come from `weight_overrides` when an entry exists for the
    `(u, v, key)` link, otherwise from its stored ``weight``. Links with an
    infinite cost are never traversed. The heuristic is the great-circle
    distance to `goal`, which never exceeds the remaining road distance.
    Returns ``None`` when `goal` cannot be reached.
    """
    if start not in graph or goal not in graph:
        return None

    overrides = weight_overrides or {}
    goal_coord = node_coordinate(graph, goal)

    def heuristic(node: Hashable) -> float:
        return distance(node_coordinate(graph, node), goal_coord)

    tie = count()
    frontier: list[tuple[float, int, float, Hashable]] = [
        (heuristic(start), next(tie), 0.0, start),
    ]
    # best_cost caches the cheapest known cost to each node to avoid rework.
    best_cost: dict[Hashable, float] = {start: 0.0}
    came_from: dict[Hashable, Hashable] = {}

    while frontier:
        _, _, cost, node = heappop(frontier)
        if node == goal:
            return _walk_back(came_from, goal)

        if cost > best_cost.get(node, math.inf):
            continue

        for _, neighbor, key, weight in graph.out_edges(node, keys=True, data="weight"):
            step_cost = overrides.get((node, neighbor, key), weight)
            if math.isinf(step_cost):
                continue
            new_cost = cost + step_cost
            if new_cost < best_cost.get(neighbor, math.inf):
                best_cost[neighbor] = new_cost
                came_from[neighbor] = node
                heappush(
                    frontier,
                    (new_cost + heuristic(neighbor), next(tie), new_cost, neighbor),
                )

    return None


def path_cost(
    graph: nx.MultiDiGraph,
    nodes: Sequence[Hashable],
    weight_overrides: WeightOverrides | None = None,
) -> float:
    """Sum the cheapest link cost between each pair of consecutive nodes."""
    overrides = weight_overrides or {}
    total = 0.0
    for u, v in pairwise(nodes):
        links = graph.get_edge_data(u, v)
        if not links:
            return math.inf
        total += min(overrides.get((u, v, key), data["weight"]) for key, data in links.items())
    return total


def _walk_back(came_from: dict[Hashable, Hashable], goal: Hashable) -> list[Hashable]:
    """Follow parent links from the goal; the result ends at the start node."""
    path = [goal]
    node = goal
    while node in came_from:
        node = came_from[node]
        path.append(node)
    return path
