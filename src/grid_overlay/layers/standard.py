"""Uniform circle markers for every node."""

from dataclasses import dataclass

from src.grid_overlay.layers.base import LayerKind, PaintSummary, Projector, paint_markers
from src.grid_overlay.model import AnnotatedGraph, NodeId, PixelPoint
from src.grid_overlay.palette import DEFAULT_STROKE_WIDTH, MARKER_COLOR, MARKER_DIAMETER
from src.grid_overlay.surface import Surface


@dataclass(frozen=True)
class UniformStyler:
    """Same colour and stroke for every node, no position correction."""

    color: str = MARKER_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH

    def choose_color(self, node_id: NodeId) -> str:
        return self.color

    def choose_stroke(self, node_id: NodeId) -> float:
        return self.stroke_width

    def correct_position(self, point: PixelPoint, node_id: NodeId) -> PixelPoint:
        return point


class StandardNodeLayer:
    """Draws every node as a fixed-size blue circle."""

    kind = LayerKind.STANDARD

    def __init__(self, graph: AnnotatedGraph, styler: UniformStyler | None = None, diameter: int = MARKER_DIAMETER):
        self.graph = graph
        self.styler = styler or UniformStyler()
        self.diameter = diameter

    def paint_layer(self, projector: Projector, surface: Surface) -> PaintSummary:
        return paint_markers(self.graph, projector, surface, self.styler, self.diameter)

    def close(self) -> None:
        pass
