"""Diagram: the geometry a layout strategy hands to the SVG writer."""

from __future__ import annotations

from dataclasses import dataclass, field

from layermap.core.graph.model import Container, Rectangle


@dataclass
class Pill:
    """Small rounded badge pinned to a corner of a node."""

    text: str
    color: str
    x: int
    y: int


@dataclass
class DiagramNode:
    """A container placed on the canvas."""

    container: Container
    rect: Rectangle
    is_folder: bool = False
    is_orphan: bool = False
    depth: int | None = None
    details: str = ""
    tooltip: str = ""
    pills: list[Pill] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.container.label()


@dataclass
class DiagramBand:
    """Horizontal background band of the layered view."""

    depth: int
    rect: Rectangle


@dataclass
class DiagramEdge:
    source: Rectangle
    target: Rectangle
    is_circular: bool = False
    is_up_dependency: bool = False
    is_folder: bool = False

    @property
    def is_violation(self) -> bool:
        return self.is_circular or self.is_up_dependency


@dataclass
class Diagram:
    """Everything needed to draw one view of a graph."""

    width: int
    height: int
    title: str = ""
    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[DiagramEdge] = field(default_factory=list)
    bands: list[DiagramBand] = field(default_factory=list)
