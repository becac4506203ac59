from __future__ import annotations

import math
from itertools import combinations

import networkx as nx
import pytest

from georah.geo import node_key
from georah.graph.build_graph import build_graph
from georah.server.search.alternative import penalize_node
from georah.server.search.astar import find_path, path_cost

from conftest import M, N1, N2, S, T


def test_path_is_returned_from_goal_back_to_start(loop_roads) -> None:
    graph = build_graph(loop_roads)
    path = find_path(graph, node_key(S), node_key(T))

    assert path == [node_key(T), node_key(M), node_key(S)]


def test_same_start_and_goal(single_road) -> None:
    graph = build_graph(single_road)
    assert find_path(graph, node_key(M), node_key(M)) == [node_key(M)]


def test_disconnected_nodes_have_no_path(disjoint_roads) -> None:
    graph = build_graph(disjoint_roads)
    assert find_path(graph, node_key((0.0, 0.0)), node_key((0.02, 0.005))) is None


def test_unknown_nodes_have_no_path(single_road) -> None:
    graph = build_graph(single_road)
    assert find_path(graph, "nowhere", node_key(T)) is None


def test_paths_are_as_short_as_dijkstra(grid_roads) -> None:
    graph = build_graph(grid_roads)
    nodes = sorted(graph.nodes)

    for start, goal in combinations(nodes[::3], 2):
        path = find_path(graph, start, goal)
        assert path is not None
        expected = nx.dijkstra_path_length(graph, start, goal, weight="weight")
        assert path_cost(graph, path[::-1]) == pytest.approx(expected)


def test_overrides_steer_the_search_away(loop_roads) -> None:
    graph = build_graph(loop_roads)
    overrides = penalize_node(graph, node_key(M))

    path = find_path(graph, node_key(S), node_key(T), overrides)

    assert path == [node_key(T), node_key(N2), node_key(N1), node_key(S)]


def test_blocking_every_route_leaves_no_path(single_road) -> None:
    graph = build_graph(single_road)
    overrides = penalize_node(graph, node_key(M))

    assert find_path(graph, node_key(S), node_key(T), overrides) is None


def test_overrides_do_not_touch_stored_weights(loop_roads) -> None:
    graph = build_graph(loop_roads)
    before = sorted(graph.edges(keys=True, data="weight"))

    find_path(graph, node_key(S), node_key(T), penalize_node(graph, node_key(M)))

    assert sorted(graph.edges(keys=True, data="weight")) == before


def test_path_cost_of_unlinked_nodes_is_infinite(single_road) -> None:
    graph = build_graph(single_road)
    assert math.isinf(path_cost(graph, [node_key(S), node_key(T)]))
