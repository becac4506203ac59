from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from georah.geo import DEFAULT_SPEED_KMH
from georah.server.graph.snap import SEARCH_RADIUS_M, SNAP_MAX_DISTANCE_M

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ASSETS_DIR = PROJECT_ROOT / "assets"
DEFAULT_ROADS_FILE = ASSETS_DIR / "roads.geojson"


class RoutingSettings(BaseModel):
    """Tunable thresholds for snapping and alternative route search.

    Attributes
    ----------
    search_radius_m:
        Radius around a query point in which graph nodes are collected
        before projecting onto their segments.
    max_snap_distance_m:
        Snaps farther than this from the query point count as "no road".
    max_overlap:
        Alternatives sharing this fraction of nodes with the main route or
        more are considered the same route.
    max_detour_ratio:
        Alternatives longer than this multiple of the main route are
        rejected.
    checkpoint_fractions:
        Positions along the main route, as fractions of its node count,
        whose node is blocked to force the search to diverge.
    average_speed_kmh:
        Speed used for duration estimates.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    search_radius_m: float = Field(default=SEARCH_RADIUS_M, gt=0)
    max_snap_distance_m: float = Field(default=SNAP_MAX_DISTANCE_M, gt=0)
    max_overlap: float = Field(default=0.999, gt=0, le=1)
    max_detour_ratio: float = Field(default=5.0, ge=1)
    checkpoint_fractions: tuple[float, ...] = (0.15, 0.30, 0.50, 0.70, 0.85)
    average_speed_kmh: float = Field(default=DEFAULT_SPEED_KMH, gt=0)

    @model_validator(mode="after")
    def check_fractions(self) -> RoutingSettings:  # noqa: D102
        if any(not 0 <= fraction <= 1 for fraction in self.checkpoint_fractions):
            raise ValueError("checkpoint_fractions must lie within [0, 1].")
        return self


def resolve_roads_path(roads_path: str | Path | None = None) -> Path:
    """Return the road GeoJSON to load, defaulting to `assets/roads.geojson`."""
    path = Path(roads_path) if roads_path is not None else DEFAULT_ROADS_FILE
    if not path.exists():
        msg = f"Road GeoJSON file not found: {path}"
        raise FileNotFoundError(msg)
    return path
