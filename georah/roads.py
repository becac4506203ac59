"""Read-only road collections consumed by the graph builder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol, Sequence

import orjson

# region Types & Configuration

RoadRecord = Mapping[str, Any]

LOGGER = logging.getLogger(__name__)
FEATURE_COLLECTION_TYPE = "FeatureCollection"

# endregion Types & Configuration


# region API


class RoadSource(Protocol):
    """Anything able to hand over the full road collection once."""

    def load(self) -> Iterable[RoadRecord]:  # noqa: D102
        ...


class InMemoryRoadSource:
    """Road source backed by an already materialized list of records."""

    def __init__(self, records: Sequence[RoadRecord]) -> None:
        self._records = list(records)

    def load(self) -> list[RoadRecord]:
        return list(self._records)


class GeoJSONRoadSource:
    """Road source reading a GeoJSON FeatureCollection from disk.

    Features are returned untouched: `geometry.coordinates` stays in
    `[lon, lat]` order and is swapped by the graph builder.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[RoadRecord]:
        if not self.path.exists():
            msg = f"Road GeoJSON file not found: {self.path}"
            raise FileNotFoundError(msg)

        document = orjson.loads(self.path.read_bytes())
        features = parse_features(document)
        LOGGER.info("Loaded %d road features from %s", len(features), self.path)
        return features


def parse_features(document: object) -> list[RoadRecord]:
    """Return the road records of a FeatureCollection or a bare feature list."""
    if isinstance(document, list):
        features = document
    elif isinstance(document, dict):
        if document.get("type") != FEATURE_COLLECTION_TYPE:
            raise ValueError("Road GeoJSON must be a FeatureCollection.")
        features = document.get("features")
        if not isinstance(features, list):
            raise ValueError("FeatureCollection is missing its features array.")
    else:
        msg = f"Unsupported road document of type {type(document).__name__}."
        raise TypeError(msg)

    return [feature for feature in features if isinstance(feature, dict)]


# endregion API
