"""Geometry and drawing constants shared by every layout strategy."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Node footprint
# ---------------------------------------------------------------------------

NODE_MIN_WIDTH = 300
NODE_MIN_HEIGHT = 80

# Gap between sibling boxes, applied as an inset when drawing.
GAP = 4
PADDING = 35
TEXT_PADDING = 10

PILL_SIZE = 20
PILL_OFFSET = 20

# Estimated width of one label character.
CHAR_WIDTH = 11
FONT_SIZE = 16
SMALL_FONT_SIZE = 11

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

COLOR_BACKGROUND = "#ffffff"
COLOR_TEXT = "#1f2933"
COLOR_TEXT_DIM = "#6b7785"
COLOR_FOLDER_FILL = "#f3f6fa"
COLOR_FOLDER_STROKE = "#b8c4d2"
COLOR_LEAF_FILL = "#ffffff"
COLOR_LEAF_STROKE = "#5a6b7d"
COLOR_ORPHAN_FILL = "#fff4d6"
COLOR_BAND_FILL = "#eef2f7"
COLOR_EDGE = "#4d7cc7"
COLOR_EDGE_FOLDER = "#9aa9bb"
COLOR_WARNING = "#f29111"
COLOR_ERROR = "#e02b2b"
COLOR_PILL_IN = "#3b9c4a"
COLOR_PILL_OUT = "#4d7cc7"

STROKE_EDGE = 1
STROKE_VIOLATION = 3

# Directory that holds third-party script packages; adapters drop any
# path containing it.
EXTERNAL_DEPENDENCY_DIR = "node_modules"

# Path segment of containers grouping dependencies outside the project;
# tooltips list their entries last.
EXTERNAL_GROUP = "External"

# Exit status used by the CLI when circular dependencies are present.
EXIT_CIRCULAR = 100
