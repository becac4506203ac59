from __future__ import annotations

from typing import Callable

import pytest

from georah.geo import Coordinate

# (lat, lon) points of a small loop: a direct road S-M-T and a longer
# detour S-N1-N2-T bulging north of it. Neighbouring points are ~0.5 km apart.
S = (0.0, 0.0)
M = (0.0, 0.005)
T = (0.0, 0.010)
N1 = (0.003, 0.0025)
N2 = (0.003, 0.0075)

RoadFactory = Callable[..., dict]


def _road(*points: Coordinate, name: str | None = None) -> dict:
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {
            "type": "LineString",
            "coordinates": [[lon, lat] for lat, lon in points],
        },
    }


@pytest.fixture
def make_road() -> RoadFactory:
    """Return a factory for GeoJSON LineString road features."""
    return _road


@pytest.fixture
def single_road() -> list[dict]:
    return [_road(S, M, T, name="direct")]


@pytest.fixture
def loop_roads() -> list[dict]:
    return [
        _road(S, M, T, name="direct"),
        _road(S, N1, N2, T, name="detour"),
    ]


@pytest.fixture
def disjoint_roads() -> list[dict]:
    # Two roads ~2.2 km apart with no shared node.
    return [
        _road((0.0, 0.0), (0.0, 0.005), name="south"),
        _road((0.02, 0.0), (0.02, 0.005), name="north"),
    ]


@pytest.fixture
def grid_roads() -> list[dict]:
    """A 4x4 irregular grid of crossing roads."""
    size = 4

    def point(i: int, j: int) -> Coordinate:
        return (i * 0.004 + (j % 2) * 0.0007, j * 0.004 + (i % 3) * 0.0005)

    rows = [_road(*(point(i, j) for j in range(size))) for i in range(size)]
    cols = [_road(*(point(i, j) for i in range(size))) for j in range(size)]
    return rows + cols
