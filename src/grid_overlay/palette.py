"""Colours, strokes and marker geometry used by the node layers."""

# Marker geometry (pixels)
MARKER_DIAMETER = 6
DEFAULT_STROKE_WIDTH = 5
THIN_STROKE_WIDTH = 2          # Stations with no load observation yet
STATION_OFFSET_PX = 5          # Diagonal nudge for co-located stations
LABEL_OFFSET_PX = 20           # Labels sit this far below the node

# Load readout position (pixels from top-left)
READOUT_POSITION = (100, 20)
READOUT_TEMPLATE = "Max clients at station: {max_load}"

# Colours (plotly colour strings)
MARKER_COLOR = "rgb(0, 0, 255)"            # Default node / station without data
NEUTRAL_COLOR = "rgb(255, 255, 255)"       # Non-station nodes on the load layer
TEXT_COLOR = "rgb(255, 255, 255)"
LOW_LOAD_COLOR = "rgba(0, 255, 0, 0.784)"
MID_LOAD_COLOR = "rgba(255, 255, 0, 0.784)"
HIGH_LOAD_COLOR = "rgba(255, 0, 0, 0.784)"
OUT_OF_RANGE_COLOR = "rgba(0, 0, 0, 0.784)"

# Event type prefix for charging station load reports
CHARGING_STATION_EVENT_PREFIX = "infrastructure:chargingstation"
