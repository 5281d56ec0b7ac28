"""
Charging-station markers coloured by live client load.

Load reports arrive from the simulation's event bus, possibly on another
thread than the one painting. Each report overwrites the station's entry in
the load table and, when it is a new maximum, ratchets the tier thresholds
upwards. Both live in one immutable ``LoadSnapshot`` that is swapped under a
lock, so a paint pass always classifies against a load table and thresholds
that belong together.

The set of stations is read from the graph once, at construction. Stations
flagged later are not picked up.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from src.grid_overlay.errors import MalformedEventError
from src.grid_overlay.events import Event, EventBus, type_prefix_filter
from src.grid_overlay.layers.base import LayerKind, PaintSummary, Projector, paint_markers
from src.grid_overlay.model import STATION_KEY, AnnotatedGraph, NodeId, PixelPoint
from src.grid_overlay.palette import (
    CHARGING_STATION_EVENT_PREFIX,
    DEFAULT_STROKE_WIDTH,
    HIGH_LOAD_COLOR,
    LOW_LOAD_COLOR,
    MARKER_COLOR,
    MARKER_DIAMETER,
    MID_LOAD_COLOR,
    NEUTRAL_COLOR,
    OUT_OF_RANGE_COLOR,
    READOUT_POSITION,
    READOUT_TEMPLATE,
    STATION_OFFSET_PX,
    TEXT_COLOR,
    THIN_STROKE_WIDTH,
)
from src.grid_overlay.surface import Surface

logger = logging.getLogger(__name__)


class LoadTier(str, Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    OUT_OF_RANGE = "out_of_range"


TIER_COLORS = {
    LoadTier.LOW: LOW_LOAD_COLOR,
    LoadTier.MID: MID_LOAD_COLOR,
    LoadTier.HIGH: HIGH_LOAD_COLOR,
    LoadTier.OUT_OF_RANGE: OUT_OF_RANGE_COLOR,
}


@dataclass(frozen=True)
class ThresholdState:
    """Tier boundaries derived from the highest load seen so far."""

    max_load: int = 0
    green: int = 0
    yellow: int = 0
    red: int = 0

    def ratchet(self, clients: int) -> "ThresholdState":
        """Return thresholds for a new maximum, or self if clients is not one."""
        if clients <= self.max_load:
            return self
        return ThresholdState(
            max_load=clients,
            green=clients // 3,
            yellow=2 * clients // 3,
            red=clients,
        )


def classify_load(load: int, thresholds: ThresholdState) -> LoadTier:
    """
    Place a load into a tier, checking the boundaries in ascending order.

    OUT_OF_RANGE covers a load above ``red``. It cannot happen with a
    consistent snapshot but stays a defined result for thresholds that lag
    behind the load they are compared against.
    """
    if load <= thresholds.green:
        return LoadTier.LOW
    if load <= thresholds.yellow:
        return LoadTier.MID
    if load <= thresholds.red:
        return LoadTier.HIGH
    return LoadTier.OUT_OF_RANGE


@dataclass(frozen=True)
class LoadSnapshot:
    """Load table and thresholds as of one moment. Never mutated."""

    loads: Mapping[NodeId, int] = field(default_factory=lambda: MappingProxyType({}))
    thresholds: ThresholdState = field(default_factory=ThresholdState)


class StationLoadState:
    """
    Load table plus thresholds, updated as one unit.

    Writers copy the table, apply the update and swap the new snapshot in
    under ``_lock``. Readers take the current reference without locking;
    the swap is a single attribute assignment.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = LoadSnapshot()

    def record(self, station: NodeId, clients: int) -> LoadSnapshot:
        with self._lock:
            current = self._snapshot
            thresholds = current.thresholds.ratchet(clients)
            if current.loads.get(station) == clients and thresholds is current.thresholds:
                return current

            loads = dict(current.loads)
            loads[station] = clients
            self._snapshot = LoadSnapshot(MappingProxyType(loads), thresholds)
            return self._snapshot

    def snapshot(self) -> LoadSnapshot:
        return self._snapshot


@dataclass(frozen=True)
class LoadStyler:
    """Per-pass marker styling from one station set and one load snapshot."""

    stations: frozenset[NodeId]
    snapshot: LoadSnapshot

    def tier(self, node_id: NodeId) -> LoadTier | None:
        """Load tier of a station, or None for non-stations and stations without data."""
        if node_id not in self.stations:
            return None
        load = self.snapshot.loads.get(node_id)
        if load is None:
            return None
        return classify_load(load, self.snapshot.thresholds)

    def choose_color(self, node_id: NodeId) -> str:
        if node_id not in self.stations:
            return NEUTRAL_COLOR
        tier = self.tier(node_id)
        if tier is None:
            return MARKER_COLOR
        return TIER_COLORS[tier]

    def choose_stroke(self, node_id: NodeId) -> float:
        if node_id in self.stations and node_id not in self.snapshot.loads:
            return THIN_STROKE_WIDTH
        return DEFAULT_STROKE_WIDTH

    def correct_position(self, point: PixelPoint, node_id: NodeId) -> PixelPoint:
        if node_id not in self.stations:
            return point
        # Even ids up-left, odd ids down-right, so neighbouring ids split apart
        if node_id % 2 == 0:
            return point.offset(-STATION_OFFSET_PX, -STATION_OFFSET_PX)
        return point.offset(STATION_OFFSET_PX, STATION_OFFSET_PX)


def find_stations(graph: AnnotatedGraph) -> frozenset[NodeId]:
    """Ids of all nodes whose station annotation is exactly True."""
    return frozenset(
        node_id for node_id in graph.nodes()
        if graph.annotation(node_id, STATION_KEY, False) is True
    )


def _require_int(event: Event, name: str) -> int:
    value: Any = event.get(name)
    if value is None:
        raise MalformedEventError(event.type, f"missing '{name}'")
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise MalformedEventError(event.type, f"'{name}' must be an integer, got {type(value).__name__}")
    return int(value)


def parse_load_event(event: Event) -> tuple[NodeId, int]:
    """
    Extract (station id, client count) from a load report.

    Raises:
        MalformedEventError: If either attribute is missing, not an integer,
            or the client count is negative
    """
    station = _require_int(event, "station")
    clients = _require_int(event, "clients")
    if clients < 0:
        raise MalformedEventError(event.type, f"'clients' must be non-negative, got {clients}")
    return station, clients


class LoadClassifiedNodeLayer:
    """
    Station markers coloured green/yellow/red by their share of the peak load.

    Non-station nodes are drawn in a neutral colour and never moved. A
    ``Max clients at station`` readout is drawn on top of the markers.
    Call ``close()`` (or use the layer as a context manager) to stop
    receiving events.
    """

    kind = LayerKind.LOAD_CLASSIFIED

    def __init__(self, graph: AnnotatedGraph, event_bus: EventBus, diameter: int = MARKER_DIAMETER):
        self.graph = graph
        self.diameter = diameter
        self.stations = find_stations(graph)
        self._discarded_events = 0

        self._state = StationLoadState()
        self._delivery_lock = threading.RLock()
        self._closed = False
        self._event_bus = event_bus
        self._subscription = event_bus.subscribe(
            self.on_event, type_prefix_filter(CHARGING_STATION_EVENT_PREFIX)
        )
        logger.debug(f"Load layer tracking {len(self.stations)} stations")

    def on_event(self, event: Event) -> bool:
        """
        Apply a charging-station load report.

        Returns:
            True if the report was applied, False if it was discarded
            (malformed, or the layer is closed)
        """
        with self._delivery_lock:
            if self._closed:
                return False
            try:
                station, clients = parse_load_event(event)
            except MalformedEventError as e:
                self._discarded_events += 1
                logger.warning(f"Discarding load event: {e}")
                return False

            if station not in self.stations:
                logger.debug(f"Load report for unknown station {station}")
            self._state.record(station, clients)
            return True

    def snapshot(self) -> LoadSnapshot:
        return self._state.snapshot()

    @property
    def thresholds(self) -> ThresholdState:
        return self._state.snapshot().thresholds

    def styler(self, snapshot: LoadSnapshot | None = None) -> LoadStyler:
        if snapshot is None:
            snapshot = self._state.snapshot()
        return LoadStyler(self.stations, snapshot)

    def paint_layer(self, projector: Projector, surface: Surface) -> PaintSummary:
        snapshot = self._state.snapshot()
        summary = paint_markers(self.graph, projector, surface, self.styler(snapshot), self.diameter)

        readout = READOUT_TEMPLATE.format(max_load=snapshot.thresholds.max_load)
        surface.draw_text(readout, PixelPoint(*READOUT_POSITION), TEXT_COLOR)
        return summary

    def close(self) -> None:
        """
        Unsubscribe from the event bus.

        Blocks until an in-flight ``on_event`` has finished; no report is
        applied after this returns. Safe to call more than once.
        """
        self._event_bus.unsubscribe(self._subscription)
        with self._delivery_lock:
            if self._closed:
                return
            self._closed = True
        logger.debug("Load layer closed")

    @property
    def discarded_events(self) -> int:
        """Number of malformed load reports dropped so far."""
        with self._delivery_lock:
            return self._discarded_events

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "LoadClassifiedNodeLayer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
