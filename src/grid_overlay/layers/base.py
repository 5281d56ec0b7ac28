"""
Node layer contract and the shared marker painting pass.

Every node layer exposes ``paint_layer(projector, surface)``. Marker layers
delegate per-node styling to a ``MarkerStyler``: colour, stroke width and a
position correction, each a pure function of the styler's state. Layers
are distinct classes tagged with a ``LayerKind`` rather than subclasses of
one another.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from src.grid_overlay.errors import MissingAnnotationError, UnprojectableLocationError
from src.grid_overlay.model import LOCATION_KEY, AnnotatedGraph, Coordinates, NodeId, PixelPoint
from src.grid_overlay.palette import MARKER_DIAMETER
from src.grid_overlay.surface import Surface

logger = logging.getLogger(__name__)


class LayerKind(str, Enum):
    STANDARD = "standard"
    LOAD_CLASSIFIED = "load_classified"
    LABELED = "labeled"


class Projector(Protocol):
    def to_pixel(self, coordinates: Coordinates) -> PixelPoint: ...


class MarkerStyler(Protocol):
    def choose_color(self, node_id: NodeId) -> str: ...

    def choose_stroke(self, node_id: NodeId) -> float: ...

    def correct_position(self, point: PixelPoint, node_id: NodeId) -> PixelPoint: ...


class NodeLayer(Protocol):
    kind: LayerKind

    def paint_layer(self, projector: Projector, surface: Surface) -> "PaintSummary": ...

    def close(self) -> None: ...


@dataclass
class PaintSummary:
    """What one paint pass did."""

    drawn: int = 0
    skipped: list[NodeId] = field(default_factory=list)


def marker_origin(point: PixelPoint, diameter: int) -> PixelPoint:
    """Top-left corner of a marker centred on point."""
    return point.offset(-(diameter // 2), -(diameter // 2))


def project_node(graph: AnnotatedGraph, projector: Projector, node_id: NodeId) -> PixelPoint:
    """
    Project a node's location annotation to pixels.

    Raises:
        MissingAnnotationError: If the node has no Coordinates location
        UnprojectableLocationError: If the projector rejects the location
    """
    location = graph.annotation(node_id, LOCATION_KEY)
    if not isinstance(location, Coordinates):
        raise MissingAnnotationError(node_id, LOCATION_KEY)
    try:
        return projector.to_pixel(location)
    except (ValueError, ArithmeticError) as e:
        raise UnprojectableLocationError(node_id, LOCATION_KEY, str(e)) from e


def paint_markers(
    graph: AnnotatedGraph,
    projector: Projector,
    surface: Surface,
    styler: MarkerStyler,
    diameter: int = MARKER_DIAMETER,
) -> PaintSummary:
    """
    Draw one circle marker per node in the graph.

    Nodes without a location, or whose location the projector rejects,
    are skipped and reported; the rest of the pass carries on.

    Args:
        graph: Nodes to draw
        projector: Maps node locations to pixels
        surface: Receives draw_circle calls
        styler: Per-node colour, stroke and position correction
        diameter: Marker diameter in pixels

    Returns:
        PaintSummary with the number drawn and the ids skipped
    """
    summary = PaintSummary()

    for node_id in graph.nodes():
        try:
            point = project_node(graph, projector, node_id)
        except MissingAnnotationError as e:
            logger.warning(f"Skipping node: {e}")
            summary.skipped.append(node_id)
            continue

        point = styler.correct_position(point, node_id)
        surface.draw_circle(
            marker_origin(point, diameter),
            diameter,
            styler.choose_color(node_id),
            styler.choose_stroke(node_id),
        )
        summary.drawn += 1

    return summary
