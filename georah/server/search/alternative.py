"""Alternative route search by blocking checkpoints of the main route."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Hashable, Iterable, Sequence

from georah.logger import Logger
from georah.server.graph.stitch import RouteLeg, assemble
from georah.server.search.astar import EdgeKey, find_path
from georah.setup import RoutingSettings

if TYPE_CHECKING:
    import networkx as nx

    from georah.geo import Coordinate
    from georah.server.graph.snap import SnapResult

# Cost assigned to blocked links; the path finder never traverses them.
BLOCKED_WEIGHT = math.inf


def find_alternative(
    graph: nx.MultiDiGraph,
    main_path_nodes: Sequence[Hashable],
    start_snap: SnapResult,
    end_snap: SnapResult,
    start_pin: Coordinate,
    end_pin: Coordinate,
    main_distance_m: float | None = None,
    settings: RoutingSettings | None = None,
    logger: Logger | None = None,
) -> RouteLeg | None:
    """Return a route that differs from the main one, or ``None``.

    For each checkpoint of the main route, in order, every link touching the
    checkpoint node is blocked through a per-request override map and the
    search is repeated. The first candidate that shares less than
    ``settings.max_overlap`` of its nodes with the main route and is at most
    ``settings.max_detour_ratio`` times as long wins. The shared graph is
    only read.

    Parameters
    ----------
    main_path_nodes:
        Main route nodes as returned by `find_path` (goal back to start).
    main_distance_m:
        Length of the assembled main leg. Computed when omitted.

    """
    if not main_path_nodes:
        return None

    settings = settings or RoutingSettings()
    logger = logger or Logger()

    if main_distance_m is None:
        main_leg = assemble(
            graph, main_path_nodes, start_pin, start_snap, end_snap, end_pin,
        )
        main_distance_m = main_leg.distance_m if main_leg else 0.0
    max_distance = main_distance_m * settings.max_detour_ratio

    forward = list(reversed(main_path_nodes))
    for index, node in checkpoint_nodes(forward, settings.checkpoint_fractions):
        overrides = penalize_node(graph, node)
        candidate = find_path(
            graph, start_snap.node_id, end_snap.node_id, overrides,
        )
        if candidate is None:
            logger.debug("alternative.checkpoint.unreachable", index=index)
            continue

        overlap = node_overlap(main_path_nodes, candidate)
        if overlap >= settings.max_overlap:
            logger.debug("alternative.checkpoint.same", index=index)
            continue

        leg = assemble(
            graph,
            candidate,
            start_pin,
            start_snap,
            end_snap,
            end_pin,
            settings.average_speed_kmh,
        )
        if leg is None or leg.distance_m > max_distance:
            logger.debug("alternative.checkpoint.detour", index=index)
            continue

        logger.info(
            "alternative.accepted",
            index=index,
            overlap=f"{overlap:.3f}",
            distance_m=f"{leg.distance_m:.1f}",
        )
        return leg

    return None


def checkpoint_nodes(
    path_nodes: Sequence[Hashable],
    fractions: Iterable[float],
) -> list[tuple[int, Hashable]]:
    """Return `(index, node)` at each fraction of the path, skipping repeats."""
    if not path_nodes:
        return []

    last = len(path_nodes) - 1
    seen: set[Hashable] = set()
    checkpoints: list[tuple[int, Hashable]] = []
    for fraction in fractions:
        index = min(int(len(path_nodes) * fraction), last)
        node = path_nodes[index]
        if node in seen:
            continue
        seen.add(node)
        checkpoints.append((index, node))
    return checkpoints


def penalize_node(graph: nx.MultiDiGraph, node: Hashable) -> dict[EdgeKey, float]:
    """Return overrides blocking every link entering or leaving `node`."""
    overrides: dict[EdgeKey, float] = {}
    for u, v, key in graph.out_edges(node, keys=True):
        overrides[(u, v, key)] = BLOCKED_WEIGHT
    for u, v, key in graph.in_edges(node, keys=True):
        overrides[(u, v, key)] = BLOCKED_WEIGHT
    return overrides


def node_overlap(first: Iterable[Hashable], second: Iterable[Hashable]) -> float:
    """Share of nodes two routes have in common, relative to the larger one."""
    a, b = set(first), set(second)
    larger = max(len(a), len(b))
    if larger == 0:
        return 1.0
    return len(a & b) / larger
