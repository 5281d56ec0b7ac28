"""Graph and geometry types shared by the node layers."""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

logger = logging.getLogger(__name__)

# Annotation keys read from graph nodes
LOCATION_KEY = "location"
STATION_KEY = "station"

NodeId = int


@dataclass(frozen=True)
class Coordinates:
    """Geographic position of a node (WGS84 degrees)."""

    lat: float
    lng: float


@dataclass(frozen=True)
class PixelPoint:
    """Integer screen position. Two nodes may project to the same point."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "PixelPoint":
        return PixelPoint(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class MapBounds:
    """Geographic bounds of the visible map area."""

    north: float
    south: float
    east: float
    west: float

    def contains(self, coords: Coordinates) -> bool:
        return (self.south <= coords.lat <= self.north) and (self.west <= coords.lng <= self.east)


@dataclass(frozen=True)
class Viewport:
    """Pixel size of the drawing surface and the bounds it shows."""

    width: int
    height: int
    bounds: MapBounds


class AnnotatedGraph:
    """
    Node store with a small annotation dict per node.

    Nodes are iterated in insertion order. Links are not modelled here;
    only the node layers consume this graph.
    """

    def __init__(self) -> None:
        self._annotations: dict[NodeId, dict[str, Any]] = {}

    def add_node(self, node_id: NodeId, **annotations: Any) -> None:
        if node_id in self._annotations:
            logger.debug(f"Node {node_id} re-added, merging annotations")
            self._annotations[node_id].update(annotations)
            return
        self._annotations[node_id] = dict(annotations)

    def nodes(self) -> Iterator[NodeId]:
        return iter(list(self._annotations))

    def annotation(self, node_id: NodeId, key: str, default: Any = None) -> Any:
        return self._annotations[node_id].get(key, default)

    def set_annotation(self, node_id: NodeId, key: str, value: Any) -> None:
        self._annotations[node_id][key] = value

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._annotations

    def __len__(self) -> int:
        return len(self._annotations)
