"""High-level routing engine that wires graph setup, snapping and search."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING

from georah.errors import EngineNotInitializedError, NoPathFoundError, RoadNotFoundError
from georah.graph.build_graph import build_graph
from georah.logger import Logger, LoggingMode
from georah.roads import GeoJSONRoadSource
from georah.setup import RoutingSettings, resolve_roads_path

from .graph.snap import SnapResult, locate
from .graph.stitch import RouteResult, assemble
from .search.alternative import find_alternative
from .search.astar import find_path

if TYPE_CHECKING:
    import networkx as nx

    from georah.geo import Coordinate
    from georah.roads import RoadSource


class RouteEngine:
    """Owns one road graph and answers routing requests against it.

    The graph is built by `initialize` and only read afterwards, so requests
    may run concurrently once initialization has completed.
    """

    def __init__(
        self,
        road_source: RoadSource,
        settings: RoutingSettings | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.road_source = road_source
        self.settings = settings or RoutingSettings()
        self.logger = logger or Logger()
        self._graph: nx.MultiDiGraph | None = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:  # noqa: D102
        return self._graph is not None

    @property
    def graph(self) -> nx.MultiDiGraph:
        """The road graph; raises until `initialize` has completed."""
        if self._graph is None:
            raise EngineNotInitializedError
        return self._graph

    def initialize(self) -> None:
        """Build the graph from the road source; later calls return at once."""
        if self._graph is not None:
            return
        with self._lock:
            if self._graph is not None:
                return
            with self.logger.phase("graph.build"):
                graph = build_graph(self.road_source.load())
            self.logger.graph_stats(graph)
            self._graph = graph

    def locate(self, lat: float, lng: float) -> SnapResult | None:
        """Snap a coordinate onto the nearest road using configured radii."""
        return locate(
            self.graph,
            (lat, lng),
            search_radius_m=self.settings.search_radius_m,
            max_snap_distance_m=self.settings.max_snap_distance_m,
        )

    def compute_route(
        self,
        origin_lat: float,
        origin_lng: float,
        dest_lat: float,
        dest_lng: float,
    ) -> RouteResult:
        """Return the main route and, when one exists, a distinct alternative.

        Raises `EngineNotInitializedError` before `initialize` and
        `RoadNotFoundError` when an endpoint has no road within reach. When the
        endpoints lie on disconnected parts of the network the main route is
        ``None``.
        """
        graph = self.graph
        start_pin: Coordinate = (origin_lat, origin_lng)
        end_pin: Coordinate = (dest_lat, dest_lng)

        with self.logger.phase("snap.origin", lat=origin_lat, lng=origin_lng):
            start_snap = self._snap("origin", start_pin)
        with self.logger.phase("snap.destination", lat=dest_lat, lng=dest_lng):
            end_snap = self._snap("destination", end_pin)

        search_phase = self.logger.phase(
            "search.main",
            start=start_snap.node_id,
            goal=end_snap.node_id,
        )
        with search_phase:
            main_nodes = find_path(graph, start_snap.node_id, end_snap.node_id)

        main = assemble(
            graph,
            main_nodes,
            start_pin,
            start_snap,
            end_snap,
            end_pin,
            self.settings.average_speed_kmh,
        )
        self.logger.leg_stats("main", main)
        if main is None:
            return RouteResult(main=None, alternative=None)

        with self.logger.phase("search.alternative", nodes=len(main_nodes)):
            alternative = find_alternative(
                graph,
                main_nodes,
                start_snap,
                end_snap,
                start_pin,
                end_pin,
                main_distance_m=main.distance_m,
                settings=self.settings,
                logger=self.logger,
            )
        self.logger.leg_stats("alternative", alternative)
        return RouteResult(main=main, alternative=alternative)

    def calculate_route(
        self,
        origin_lat: float,
        origin_lng: float,
        dest_lat: float,
        dest_lng: float,
    ) -> list[Coordinate]:
        """Return only the main route's coordinates.

        Raises `NoPathFoundError` when the endpoints are not connected.
        """
        result = self.compute_route(origin_lat, origin_lng, dest_lat, dest_lng)
        if result.main is None:
            raise NoPathFoundError(
                f"({origin_lat}, {origin_lng})",
                f"({dest_lat}, {dest_lng})",
            )
        return result.main.path

    def _snap(self, role: str, pin: Coordinate) -> SnapResult:
        snap = self.locate(*pin)
        if snap is None:
            raise RoadNotFoundError(role, pin)
        return snap


def load_engine(
    roads_path: str | Path | None = None,
    settings: RoutingSettings | None = None,
    logging_mode: LoggingMode | str = LoggingMode.NONE,
) -> RouteEngine:
    """Create and initialize an engine over a road GeoJSON file.

    Parameters
    ----------
    roads_path:
        GeoJSON FeatureCollection of (Multi)LineString roads. Defaults to
        `assets/roads.geojson`.
    settings:
        Snapping and alternative search thresholds.
    logging_mode:
        Controls log verbosity for the routing pipeline. Accepts
        `LoggingMode` values or their lowercase string names.

    """
    logger = Logger(LoggingMode.from_value(logging_mode))
    source = GeoJSONRoadSource(resolve_roads_path(roads_path))
    engine = RouteEngine(source, settings=settings, logger=logger)
    engine.initialize()
    return engine
