"""Grid Overlay - node layers for the simulation map."""

from src.grid_overlay.events import Event, EventBus
from src.grid_overlay.layers import LabeledNodeLayer, LoadClassifiedNodeLayer, StandardNodeLayer
from src.grid_overlay.loader import load_events, load_graph
from src.grid_overlay.model import AnnotatedGraph, Coordinates, MapBounds, PixelPoint, Viewport
from src.grid_overlay.projection import ViewportProjector, project

__all__ = [
    "AnnotatedGraph",
    "Coordinates",
    "Event",
    "EventBus",
    "LabeledNodeLayer",
    "LoadClassifiedNodeLayer",
    "MapBounds",
    "PixelPoint",
    "StandardNodeLayer",
    "Viewport",
    "ViewportProjector",
    "load_events",
    "load_graph",
    "project",
]
