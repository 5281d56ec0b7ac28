"""Node identifier labels."""

import logging

from src.grid_overlay.errors import MissingAnnotationError
from src.grid_overlay.layers.base import LayerKind, PaintSummary, Projector, project_node
from src.grid_overlay.model import AnnotatedGraph
from src.grid_overlay.palette import LABEL_OFFSET_PX, TEXT_COLOR
from src.grid_overlay.surface import Surface

logger = logging.getLogger(__name__)


class LabeledNodeLayer:
    """
    Draws each node's id as text below its projected position.

    The label is shifted down so it clears a marker drawn at the same
    point by a marker layer stacked with this one.
    """

    kind = LayerKind.LABELED

    def __init__(self, graph: AnnotatedGraph, color: str = TEXT_COLOR, offset_px: int = LABEL_OFFSET_PX):
        self.graph = graph
        self.color = color
        self.offset_px = offset_px

    def paint_layer(self, projector: Projector, surface: Surface) -> PaintSummary:
        summary = PaintSummary()

        for node_id in self.graph.nodes():
            try:
                point = project_node(self.graph, projector, node_id)
            except MissingAnnotationError as e:
                logger.warning(f"Skipping label: {e}")
                summary.skipped.append(node_id)
                continue

            surface.draw_text(str(node_id), point.offset(0, self.offset_px), self.color)
            summary.drawn += 1

        return summary

    def close(self) -> None:
        pass
