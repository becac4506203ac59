from __future__ import annotations

import pytest

from georah.geo import distance, node_key
from georah.graph.build_graph import build_graph
from georah.server.graph.snap import locate, nearest_nodes

from conftest import M, S, T

A, B, C = (0.0, 0.0), (0.0, 1.0), (0.0, 2.0)


@pytest.fixture
def collinear_graph(make_road):
    return build_graph([make_road(A, B), make_road(B, C)])


def test_snap_lands_inside_enclosing_segment(collinear_graph) -> None:
    # Nodes are ~55 km from the query, so the radius has to reach them.
    snap = locate(collinear_graph, (0.0001, 0.5), search_radius_m=60_000)

    assert snap is not None
    assert snap.point[0] == pytest.approx(0.0, abs=1e-9)
    assert snap.point[1] == pytest.approx(0.5)
    assert snap.node_id in {node_key(A), node_key(B)}
    assert snap.distance_m == pytest.approx(distance((0.0001, 0.5), snap.point))


def test_entry_node_is_the_segment_end_closest_to_the_snap(collinear_graph) -> None:
    snap = locate(collinear_graph, (0.0001, 0.3), search_radius_m=60_000)
    assert snap is not None
    assert snap.node_id == node_key(A)

    snap = locate(collinear_graph, (-0.0001, 1.8), search_radius_m=60_000)
    assert snap is not None
    assert snap.node_id == node_key(C)


def test_no_candidate_nodes_in_radius_means_no_snap(collinear_graph) -> None:
    assert locate(collinear_graph, (0.0001, 0.5), search_radius_m=3000) is None


def test_snap_beyond_max_distance_is_rejected(single_road) -> None:
    graph = build_graph(single_road)
    # ~1.1 km north of the road.
    point = (0.01, 0.005)

    assert locate(graph, point, max_snap_distance_m=500) is None
    snap = locate(graph, point)
    assert snap is not None
    assert snap.node_id == node_key(M)


def test_long_segment_is_found_through_distant_endpoints(make_road) -> None:
    # A 2.2 km segment whose middle is the closest road point; both ends
    # lie within the search radius but far from the snap.
    graph = build_graph([make_road((0.0, 0.0), (0.0, 0.02))])
    snap = locate(graph, (0.0002, 0.01))

    assert snap is not None
    assert snap.point[1] == pytest.approx(0.01)
    assert snap.distance_m == pytest.approx(22.2, abs=0.5)


def test_snap_picks_the_globally_closest_segment(loop_roads) -> None:
    graph = build_graph(loop_roads)
    # Just south of the detour's northern stretch.
    snap = locate(graph, (0.0028, 0.005))

    assert snap is not None
    assert snap.point[0] == pytest.approx(0.003)
    assert snap.distance_m == pytest.approx(22.2, abs=0.5)


def test_empty_graph_never_snaps() -> None:
    assert locate(build_graph([]), (0.0, 0.0)) is None


def test_nearest_nodes_respects_radius(single_road) -> None:
    graph = build_graph(single_road)
    found = dict(nearest_nodes(graph, S, radius_m=600))

    assert set(found) == {node_key(S), node_key(M)}
    assert node_key(T) not in found
    assert found[node_key(S)] == 0
