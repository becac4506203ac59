"""Exception types raised by the routing engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from georah.geo import Coordinate


class RoutingError(Exception):
    """Base class for routing failures surfaced to callers."""


class EngineNotInitializedError(RoutingError):
    """Raised when a route is requested before the graph has been built."""

    def __init__(self) -> None:
        super().__init__("Route engine is not initialized.")


class RoadNotFoundError(RoutingError):
    """Raised when an endpoint has no road within the snapping radius."""

    def __init__(self, role: str, coord: Coordinate) -> None:
        self.role = role
        self.coord = coord
        lat, lon = coord
        super().__init__(f"No road found near the {role} point ({lat}, {lon}).")


class NoPathFoundError(RoutingError):
    """Raised by callers that prefer an exception over an empty main route."""

    def __init__(self, start: str, goal: str) -> None:
        self.start = start
        self.goal = goal
        super().__init__(f"No path connects {start} to {goal}.")
