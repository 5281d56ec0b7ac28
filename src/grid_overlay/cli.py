"""Command-line interface for rendering grid node layers."""

import argparse
import logging
import os
import sys
import threading
import time

from dotenv import load_dotenv

from src.grid_overlay.events import Event, EventBus
from src.grid_overlay.layers import LabeledNodeLayer, LoadClassifiedNodeLayer, NodeLayer, StandardNodeLayer
from src.grid_overlay.loader import load_events, load_graph
from src.grid_overlay.model import Viewport
from src.grid_overlay.projection import ViewportProjector
from src.grid_overlay.surface import FigureSurface, export_html, show_figure
from src.logging_config import setup_logging

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
FRAME_INTERVAL_SECONDS = 0.1   # Repaint cadence while events are replayed

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}")
        return default


def replay_events(bus: EventBus, events: list[Event], delay: float = 0.0) -> None:
    """Publish events in order, optionally pausing between them."""
    for event in events:
        bus.publish(event)
        if delay:
            time.sleep(delay)


def paint_frame(layers: list[NodeLayer], projector: ViewportProjector, surface: FigureSurface) -> None:
    """Paint all layers bottom to top onto a cleared surface."""
    surface.clear()
    for layer in layers:
        summary = layer.paint_layer(projector, surface)
        if summary.skipped:
            logger.debug(f"{layer.kind.value}: skipped {len(summary.skipped)} nodes")


def main() -> None:
    """Main entry point for the grid overlay CLI."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Grid Overlay - render grid nodes and live charging-station load",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # View the graph in the browser
  python -m src.grid_overlay data/grid.json

  # Replay recorded load events and label nodes
  python -m src.grid_overlay data/grid.json --events data/loads.json --labels

  # Export to HTML file
  python -m src.grid_overlay data/grid.json --events data/loads.json --export grid.html
        """,
    )

    parser.add_argument("path", type=str, help="Path to grid graph JSON file")
    parser.add_argument(
        "--events",
        type=str,
        metavar="FILE",
        help="JSON list of simulation events to replay into the load layer",
    )
    parser.add_argument(
        "--event-delay",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Pause between replayed events",
    )
    parser.add_argument("--labels", action="store_true", help="Draw node ids")
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw uniform markers instead of load-classified ones",
    )
    parser.add_argument("--width", type=int, default=None, help="Viewport width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Viewport height in pixels")
    parser.add_argument(
        "--export",
        type=str,
        metavar="FILE",
        help="Export to HTML file instead of opening browser",
    )
    parser.add_argument("--title", type=str, default=None, help="Custom title for the visualization")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    setup_logging()
    if args.verbose:
        logging.getLogger("src.grid_overlay").setLevel(logging.DEBUG)

    try:
        logger.info(f"Loading graph from {args.path}")
        grid_map = load_graph(args.path)
        events = load_events(args.events) if args.events else []
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    width = args.width or _env_int("GRID_OVERLAY_WIDTH", DEFAULT_WIDTH)
    height = args.height or _env_int("GRID_OVERLAY_HEIGHT", DEFAULT_HEIGHT)
    viewport = Viewport(width=width, height=height, bounds=grid_map.bounds)
    projector = ViewportProjector(viewport)
    surface = FigureSurface(viewport, title=args.title or f"Grid Overlay: {args.path}")

    bus = EventBus()
    layers: list[NodeLayer] = []
    if args.plain:
        layers.append(StandardNodeLayer(grid_map.graph))
    else:
        layers.append(LoadClassifiedNodeLayer(grid_map.graph, bus))
    if args.labels:
        layers.append(LabeledNodeLayer(grid_map.graph))

    try:
        replayer = threading.Thread(
            target=replay_events,
            args=(bus, events, args.event_delay),
            name="event-replay",
            daemon=True,
        )
        replayer.start()

        frames = 0
        while replayer.is_alive():
            paint_frame(layers, projector, surface)
            frames += 1
            replayer.join(timeout=FRAME_INTERVAL_SECONDS)

        paint_frame(layers, projector, surface)
        logger.info(f"Replayed {len(events)} events over {frames + 1} frames")
    finally:
        for layer in layers:
            layer.close()

    if args.export:
        logger.info(f"Exporting to {args.export}")
        export_html(surface.figure, args.export)
        print(f"Exported to {args.export}")
    else:
        logger.info("Opening in browser")
        show_figure(surface.figure)


if __name__ == "__main__":
    main()
