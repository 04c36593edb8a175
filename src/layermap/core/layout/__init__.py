"""Layout strategies and the SVG writer."""

from __future__ import annotations

from layermap.config.options import RenderOptions
from layermap.core.graph.graph import Graph
from layermap.core.layout.base import LayoutStrategy, get_strategy
from layermap.core.layout.svg import SvgRenderer, render_svg
from layermap.core.layout.types import Diagram, DiagramBand, DiagramEdge, DiagramNode


def layout_graph(graph: Graph, options: RenderOptions) -> Diagram:
    """Run the strategy selected by ``options.view`` over *graph*."""
    return get_strategy(options.view).layout(graph, options)


def render_graph(graph: Graph, options: RenderOptions) -> str:
    """Lay out *graph* and return the SVG document."""
    return render_svg(layout_graph(graph, options), options)


__all__ = [
    "Diagram",
    "DiagramBand",
    "DiagramEdge",
    "DiagramNode",
    "LayoutStrategy",
    "SvgRenderer",
    "get_strategy",
    "layout_graph",
    "render_graph",
    "render_svg",
]
