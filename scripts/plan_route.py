"""CLI entrypoint for planning a route over a road GeoJSON file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import orjson

from georah.errors import RoutingError
from georah.logger import LoggingMode
from georah.server.plan import load_engine
from georah.setup import RoutingSettings

if TYPE_CHECKING:
    from georah.geo import Coordinate
    from georah.server.graph.stitch import RouteLeg, RouteResult

# region Configuration

LOGGER = logging.getLogger(__name__)

# endregion Configuration


# region GeoJSON output


def _lon_lat(coord: Coordinate) -> list[float]:
    lat, lon = coord
    return [lon, lat]


def _leg_feature(role: str, leg: RouteLeg) -> dict:
    return {
        "type": "Feature",
        "properties": {
            "role": role,
            "distance_m": round(leg.distance_m, 1),
            "distance": leg.formatted_distance,
            "duration": leg.duration,
        },
        "geometry": {
            "type": "LineString",
            "coordinates": [_lon_lat(coord) for coord in leg.path],
        },
    }


def build_geojson(
    origin: Coordinate,
    destination: Coordinate,
    result: RouteResult,
) -> dict:
    """Create a GeoJSON feature collection describing both routes."""
    features = [
        {
            "type": "Feature",
            "properties": {"role": role},
            "geometry": {"type": "Point", "coordinates": _lon_lat(pin)},
        }
        for role, pin in (("origin", origin), ("destination", destination))
    ]
    if result.main is not None:
        features.append(_leg_feature("main", result.main))
    if result.alternative is not None:
        features.append(_leg_feature("alternative", result.alternative))
    return {"type": "FeatureCollection", "features": features}


# endregion GeoJSON output


# region CLI


def run_cli(args: argparse.Namespace) -> int:
    """Plan the requested route and print it as GeoJSON."""
    settings = RoutingSettings(
        search_radius_m=args.search_radius,
        max_snap_distance_m=args.max_snap_distance,
        average_speed_kmh=args.speed,
    )
    engine = load_engine(args.roads, settings, args.log_mode)

    origin = tuple(args.origin)
    destination = tuple(args.destination)
    try:
        result = engine.compute_route(*origin, *destination)
    except RoutingError as exc:
        LOGGER.error("Routing failed: %s", exc)
        return 1

    if result.main is None:
        LOGGER.warning("Origin and destination are not connected by road.")

    geojson = build_geojson(origin, destination, result)
    sys.stdout.write(orjson.dumps(geojson, option=orjson.OPT_INDENT_2).decode())
    sys.stdout.write("\n")
    return 0 if result.main is not None else 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for route planning."""
    defaults = RoutingSettings()
    parser = argparse.ArgumentParser(
        description="Plan a main and an alternative route between two pins.",
    )
    parser.add_argument(
        "--roads",
        type=Path,
        default=None,
        help="Road GeoJSON FeatureCollection (default: assets/roads.geojson).",
    )
    parser.add_argument(
        "--origin",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        required=True,
        help="Origin pin.",
    )
    parser.add_argument(
        "--destination",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        required=True,
        help="Destination pin.",
    )
    parser.add_argument(
        "--search-radius",
        type=float,
        default=defaults.search_radius_m,
        help="Radius in meters for candidate road nodes around each pin.",
    )
    parser.add_argument(
        "--max-snap-distance",
        type=float,
        default=defaults.max_snap_distance_m,
        help="Reject pins farther than this many meters from any road.",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=defaults.average_speed_kmh,
        help="Average speed in km/h for duration estimates.",
    )
    parser.add_argument(
        "--log-mode",
        default=LoggingMode.NONE.value,
        choices=[mode.value for mode in LoggingMode],
        help="Verbosity of the per-phase routing log (written to stderr).",
    )
    parser.set_defaults(func=run_cli)
    return parser.parse_args(argv)


def _configure_logging() -> None:
    """Configure a simple logging formatter for CLI runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    _configure_logging()
    args = parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

# endregion CLI
