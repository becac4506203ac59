"""Flask API surface for exposing the route engine."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException, NotFound, ServiceUnavailable

from georah.errors import EngineNotInitializedError, RoadNotFoundError
from georah.logger import LoggingMode
from georah.server.plan import RouteEngine, load_engine
from georah.setup import RoutingSettings

if TYPE_CHECKING:
    from georah.geo import Coordinate

ENGINE_EXTENSION = "georah.engine"


def create_app(engine: RouteEngine) -> Flask:
    """Return a Flask app answering route requests with `engine`."""
    app = Flask(__name__)
    app.extensions[ENGINE_EXTENSION] = engine

    app.after_request(_inject_cors)
    app.register_error_handler(HTTPException, _json_error)
    app.add_url_rule(
        "/api/route",
        view_func=route_planner,
        methods=["POST", "OPTIONS"],
    )
    app.add_url_rule("/api/health", view_func=health, methods=["GET"])
    return app


def _engine() -> RouteEngine:
    return current_app.extensions[ENGINE_EXTENSION]


def _parse_coordinate(payload: object, label: str) -> Coordinate:
    """Validate that payload looks like {'lat': float, 'lng': float}."""
    if not isinstance(payload, dict):
        msg = f"{label} must be an object with 'lat' and 'lng'."
        raise BadRequest(msg)

    lat = payload.get("lat")
    lng = payload.get("lng", payload.get("lon"))
    if not _is_number(lat) or not _is_number(lng):
        msg = f"{label} must include numeric 'lat' and 'lng' fields."
        raise BadRequest(msg)
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:  # noqa: PLR2004
        msg = f"{label} is outside the valid latitude/longitude range."
        raise BadRequest(msg)

    return (float(lat), float(lng))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _inject_cors(response: Response) -> Response:
    """Allow simple cross-origin requests from the mobile and web clients."""
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    response.headers.setdefault("Access-Control-Allow-Headers", "Content-Type")
    response.headers.setdefault("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
    return response


def _json_error(exc: HTTPException) -> Response:
    response = jsonify({"error": exc.description})
    response.status_code = exc.code or 500
    return response


def route_planner() -> Response:
    """Plan a main route and an alternative between two pins."""
    if request.method == "OPTIONS":
        return Response("", status=204)

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        msg = "Request body must be a JSON object."
        raise BadRequest(msg)

    origin = _parse_coordinate(payload.get("origin"), "origin")
    destination = _parse_coordinate(payload.get("destination"), "destination")

    try:
        result = _engine().compute_route(*origin, *destination)
    except EngineNotInitializedError as exc:
        raise ServiceUnavailable(str(exc)) from exc
    except RoadNotFoundError as exc:
        raise NotFound(str(exc)) from exc

    return jsonify(result.to_dict())


def health() -> Response:
    """Report whether the road graph is ready."""
    engine = _engine()
    if not engine.is_initialized:
        response = jsonify({"initialized": False})
        response.status_code = 503
        return response

    graph = engine.graph
    return jsonify(
        {
            "initialized": True,
            "nodes": graph.number_of_nodes(),
            "links": graph.number_of_edges(),
        },
    )


# region CLI


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for serving the API."""
    parser = argparse.ArgumentParser(description="Serve the road routing API.")
    parser.add_argument(
        "--roads",
        type=Path,
        default=None,
        help="Road GeoJSON FeatureCollection (default: assets/roads.geojson).",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    parser.add_argument("--port", type=int, default=5000, help="Bind port.")
    parser.add_argument(
        "--log-mode",
        default=LoggingMode.INFO.value,
        choices=[mode.value for mode in LoggingMode],
        help="Verbosity of the per-request routing log.",
    )
    return parser.parse_args(argv)


def _configure_logging() -> None:
    """Configure a simple logging formatter for server runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:  # pragma: no cover
    """Build the graph, then serve requests."""
    _configure_logging()
    args = parse_args(argv)
    engine = load_engine(args.roads, RoutingSettings(), args.log_mode)
    create_app(engine).run(host=args.host, port=args.port)


if __name__ == "__main__":  # pragma: no cover
    main()

# endregion CLI
