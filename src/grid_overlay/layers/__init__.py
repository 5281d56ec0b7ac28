"""Node rendering layers."""

from src.grid_overlay.layers.base import LayerKind, NodeLayer, PaintSummary, paint_markers
from src.grid_overlay.layers.labeled import LabeledNodeLayer
from src.grid_overlay.layers.load import LoadClassifiedNodeLayer, LoadTier, ThresholdState, classify_load
from src.grid_overlay.layers.standard import StandardNodeLayer

__all__ = [
    "LayerKind",
    "NodeLayer",
    "PaintSummary",
    "paint_markers",
    "StandardNodeLayer",
    "LoadClassifiedNodeLayer",
    "LabeledNodeLayer",
    "LoadTier",
    "ThresholdState",
    "classify_load",
]
