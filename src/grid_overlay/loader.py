"""Load grid graphs and recorded load events from JSON files."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

import numpy as np

from src.grid_overlay.events import Event
from src.grid_overlay.model import LOCATION_KEY, STATION_KEY, AnnotatedGraph, Coordinates, MapBounds

logger = logging.getLogger(__name__)

# Fraction of the node extent added around it when the file has no bounds
BOUNDS_MARGIN = 0.05
# Smallest span (degrees) for derived bounds, so a single node still gets a view
MIN_SPAN_DEGREES = 0.01


@dataclass
class GridMap:
    """Container for a loaded grid graph and the bounds to show it in."""

    graph: AnnotatedGraph
    bounds: MapBounds


def _read_json(path: str) -> Any:
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse {path}: {e}") from e


def derive_bounds(locations: list[Coordinates]) -> MapBounds:
    """
    Compute bounds enclosing all locations plus a small margin.

    Args:
        locations: Node locations (must not be empty)

    Returns:
        MapBounds around the locations
    """
    lats = np.array([c.lat for c in locations])
    lngs = np.array([c.lng for c in locations])

    lat_span = max(float(np.ptp(lats)), MIN_SPAN_DEGREES)
    lng_span = max(float(np.ptp(lngs)), MIN_SPAN_DEGREES)
    lat_mid = (float(lats.max()) + float(lats.min())) / 2
    lng_mid = (float(lngs.max()) + float(lngs.min())) / 2
    half_lat = lat_span * (0.5 + BOUNDS_MARGIN)
    half_lng = lng_span * (0.5 + BOUNDS_MARGIN)

    # The margin must not push the view past the poles or the antimeridian
    return MapBounds(
        north=min(lat_mid + half_lat, 90.0),
        south=max(lat_mid - half_lat, -90.0),
        east=min(lng_mid + half_lng, 180.0),
        west=max(lng_mid - half_lng, -180.0),
    )


def _read_location(node_id: int, entry: dict) -> Coordinates:
    try:
        lat, lng = float(entry["lat"]), float(entry["lng"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"Node {node_id} has a non-numeric location: {e}") from e
    if not (np.isfinite(lat) and np.isfinite(lng)):
        raise ValueError(f"Node {node_id} has a non-finite location ({lat}, {lng})")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise ValueError(f"Node {node_id} location ({lat}, {lng}) is outside lat [-90, 90] / lng [-180, 180]")
    return Coordinates(lat, lng)


def _read_station_flag(node_id: int, entry: dict) -> bool:
    flag = entry.get("station", False)
    if not isinstance(flag, bool):
        raise ValueError(f"Node {node_id} 'station' must be true or false, got {flag!r}")
    return flag


def _read_bounds(raw: Any) -> MapBounds:
    try:
        bounds = MapBounds(**{k: float(raw[k]) for k in ("north", "south", "east", "west")})
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"missing or non-numeric edge: {e}") from e
    if not np.all(np.isfinite([bounds.north, bounds.south, bounds.east, bounds.west])):
        raise ValueError(f"non-finite edge in {bounds}")
    if bounds.north <= bounds.south or bounds.east <= bounds.west:
        raise ValueError(f"north must exceed south and east must exceed west, got {bounds}")
    return bounds


def load_graph(path: str) -> GridMap:
    """
    Load a grid graph from a JSON file.

    Expected layout::

        {"bounds": {"north": .., "south": .., "east": .., "west": ..},
         "nodes": [{"id": 1, "lat": 50.8, "lng": 4.7, "station": true}, ...]}

    ``bounds`` is optional. Nodes without lat/lng are kept but get no
    location annotation, so layers will skip them.

    Args:
        path: Path to the graph JSON file

    Returns:
        GridMap with the graph and its display bounds

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON, a node is malformed
            (non-integer id, non-boolean station flag, location that is not
            a finite lat in [-90, 90] and lng in [-180, 180]) or the bounds
            are non-finite or empty
    """
    data = _read_json(path)
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        raise ValueError(f"Graph file {path} has no 'nodes' list")

    graph = AnnotatedGraph()
    located: dict[int, Coordinates] = {}

    for entry in data["nodes"]:
        node_id = entry.get("id") if isinstance(entry, dict) else None
        if not isinstance(node_id, int) or isinstance(node_id, bool):
            raise ValueError(f"Node entry without integer id: {entry!r}")

        annotations: dict[str, Any] = {STATION_KEY: _read_station_flag(node_id, entry)}
        if "lat" in entry and "lng" in entry:
            location = _read_location(node_id, entry)
            annotations[LOCATION_KEY] = location
            located[node_id] = location
        else:
            logger.warning(f"Node {node_id} has no location")

        graph.add_node(node_id, **annotations)

    if "bounds" in data:
        try:
            bounds = _read_bounds(data["bounds"])
        except ValueError as e:
            raise ValueError(f"Invalid bounds in {path}: {e}") from e
        outside = [n for n, location in located.items() if not bounds.contains(location)]
        if outside:
            logger.warning(f"{len(outside)} nodes lie outside the map bounds and will be drawn off-screen: {outside}")
    elif located:
        bounds = derive_bounds(list(located.values()))
    else:
        raise ValueError(f"Graph file {path} has neither bounds nor located nodes")

    stations = sum(1 for n in graph.nodes() if graph.annotation(n, STATION_KEY))
    logger.info(f"Loaded graph: {len(graph)} nodes, {stations} stations")

    return GridMap(graph=graph, bounds=bounds)


def load_events(path: str) -> list[Event]:
    """
    Load recorded simulation events from a JSON list.

    Each entry needs a ``type``; every other key becomes an attribute.
    Attributes are not validated here; layers reject what they can't use.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a JSON list of typed objects
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise ValueError(f"Event file {path} must contain a list")

    events: list[Event] = []
    for entry in data:
        if not isinstance(entry, dict) or not isinstance(entry.get("type"), str):
            raise ValueError(f"Event entry without type: {entry!r}")
        attributes = {k: v for k, v in entry.items() if k != "type"}
        events.append(Event(type=entry["type"], attributes=attributes))

    logger.info(f"Loaded {len(events)} events from {path}")
    return events
