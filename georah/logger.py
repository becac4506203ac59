from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import TYPE_CHECKING, Any, Iterator, TextIO

if TYPE_CHECKING:
    import networkx as nx

    from georah.server.graph.stitch import RouteLeg


class LoggingMode(str, Enum):
    """How much of the routing pipeline is echoed to the operator."""

    NONE = "none"
    INFO = "info"
    DEBUG = "debug"

    @property
    def verbosity(self) -> int:
        """Rank of the mode; a message prints when its mode ranks no higher."""
        return _VERBOSITY[self]

    @classmethod
    def from_value(cls, value: LoggingMode | str | None) -> LoggingMode:
        """Accept a mode, its case-insensitive name, or ``None`` for silence."""
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        choices = "/".join(mode.value for mode in cls)
        msg = f"Invalid logging mode {value!r} (choose {choices})."
        raise ValueError(msg)


_VERBOSITY = {LoggingMode.NONE: 0, LoggingMode.INFO: 1, LoggingMode.DEBUG: 2}


@dataclass(slots=True)
class Logger:
    """Writes one tab-separated line per routing event to ``stream``.

    ``stream`` falls back to the current ``sys.stderr`` at write time.
    """

    mode: LoggingMode = LoggingMode.NONE
    stream: TextIO | None = field(default=None, repr=False)

    def enabled(self, level: LoggingMode) -> bool:  # noqa: D102
        return level is not LoggingMode.NONE and level.verbosity <= self.mode.verbosity

    def info(self, message: str, **context: Any) -> None:  # noqa: ANN401, D102
        self._log(LoggingMode.INFO, message, context)

    def debug(self, message: str, **context: Any) -> None:  # noqa: ANN401, D102
        self._log(LoggingMode.DEBUG, message, context)

    def graph_stats(self, graph: nx.MultiDiGraph) -> None:
        """Report the size of a freshly built road graph."""
        # Links outnumber segments two to one: both directions are stored.
        self.info(
            "graph.stats",
            nodes=graph.number_of_nodes(),
            links=graph.number_of_edges(),
            segments=graph.graph.get("segments"),
            skipped_roads=graph.graph.get("skipped_roads"),
        )

    def leg_stats(self, label: str, leg: RouteLeg | None) -> None:
        """Report whether a route leg was found, and how long it is."""
        if leg is None:
            self.info(f"route.{label}.missing")
        else:
            self.info(
                f"route.{label}.ready",
                coordinates=len(leg.path),
                distance_m=f"{leg.distance_m:.1f}",
                duration=leg.duration,
            )

    @contextmanager
    def phase(self, name: str, **details: Any) -> Iterator[None]:  # noqa: ANN401
        """Bracket a pipeline step with ``.start`` and ``.complete``/``.failed``."""
        if not self.enabled(LoggingMode.INFO):
            yield
            return

        self.info(f"{name}.start", **details)
        began = perf_counter()
        try:
            yield
        except Exception as exc:
            self.info(f"{name}.failed", error=str(exc))
            raise
        self.info(f"{name}.complete", **details)
        self.debug(f"{name}.elapsed", seconds=f"{perf_counter() - began:.3f}")

    def _log(self, level: LoggingMode, message: str, context: dict[str, Any]) -> None:
        if not self.enabled(level):
            return
        fields = [f"[{level.name}]", message]
        fields.extend(f"{key}={value}" for key, value in context.items() if value is not None)
        target = self.stream if self.stream is not None else sys.stderr
        target.write("\t".join(fields) + "\n")
