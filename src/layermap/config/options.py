"""Render options shared by the CLI, the pipeline and the layout strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ViewKind(str, Enum):
    GRID = "grid"
    LAYERS = "layers"
    POSTER = "poster"


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class EdgeScope(str, Enum):
    """Which containers edges are drawn between."""

    FILES = "files"
    FOLDERS = "folders"
    BOTH = "both"


class LineStyle(str, Enum):
    CURVE = "curve"
    STRAIGHT = "straight"
    ELBOW = "elbow"
    ANGLE = "angle"
    HIDE = "hide"
    WARNINGS = "warnings"


class LineEffect(str, Enum):
    FLAT = "flat"
    OUTLINE = "outline"
    SHADOW = "shadow"


@dataclass
class RenderOptions:
    """Everything that changes how a graph is drawn.

    ``layers`` draws band backgrounds and layer numbers, ``details`` adds
    per-container counts.  ``exclude`` holds glob patterns removed before
    the tree is built.
    """

    view: ViewKind = ViewKind.POSTER
    align: Align = Align.CENTER
    edges: EdgeScope = EdgeScope.FILES
    lines: LineStyle = LineStyle.CURVE
    line_effect: LineEffect = LineEffect.FLAT
    layers: bool = False
    details: bool = False
    externals: bool = False
    dev: bool = False
    exclude: list[str] = field(default_factory=list)
    debug: bool = False

    @property
    def draws_file_edges(self) -> bool:
        return self.edges in (EdgeScope.FILES, EdgeScope.BOTH)

    @property
    def draws_folder_edges(self) -> bool:
        return self.edges in (EdgeScope.FOLDERS, EdgeScope.BOTH)
