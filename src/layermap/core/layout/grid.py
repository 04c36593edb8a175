"""Grid view: the top-level groups as a flat, square-ish grid of boxes."""

from __future__ import annotations

import math

from layermap.config.options import RenderOptions
from layermap.core.constants import NODE_MIN_HEIGHT, NODE_MIN_WIDTH
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Container, Rectangle
from layermap.core.layout.base import aggregated_edges
from layermap.core.layout.geometry import (
    align_offset,
    count_pills,
    details_text,
    reset_rects,
    sort_by_weight,
)
from layermap.core.layout.types import Diagram, DiagramNode


class GridLayout:
    """Lay out the children of the first branching container in a grid.

    Nesting below those children is ignored; every edge is drawn between
    the two grid cells that contain its ends.  The root container keeps
    its default rectangle.
    """

    def layout(self, graph: Graph, options: RenderOptions) -> Diagram:
        graph.prepare_edges()
        reset_rects(graph)

        top = graph.root.get_first_non_common_root()
        cells = sort_by_weight(top.sub) or [top]

        cols = math.ceil(math.sqrt(len(cells)))
        rows = math.ceil(len(cells) / cols)
        width = cols * NODE_MIN_WIDTH
        height = rows * NODE_MIN_HEIGHT

        orphans = {n.id for n in graph.get_orphan_nodes()}
        diagram = Diagram(width=width, height=height, title=top.name)
        placed: dict[int, Rectangle] = {}

        for index, node in enumerate(cells):
            row, col = divmod(index, cols)
            in_row = min(cols, len(cells) - row * cols)
            shift = align_offset(width, in_row * NODE_MIN_WIDTH, options.align)
            rect = Rectangle(
                x=shift + col * NODE_MIN_WIDTH,
                y=row * NODE_MIN_HEIGHT,
                w=NODE_MIN_WIDTH,
                h=NODE_MIN_HEIGHT,
            )
            placed[node.id] = rect
            diagram.nodes.append(
                DiagramNode(
                    container=node,
                    rect=rect,
                    is_orphan=node.id in orphans,
                    details=details_text(node) if options.details else "",
                    pills=count_pills(node, rect) if options.details else [],
                )
            )

        cell_ids = {n.id for n in cells}

        def cell_of(node: Container) -> Container | None:
            current: Container | None = node
            while current is not None and current.id not in cell_ids:
                current = current.parent
            return current

        diagram.edges = aggregated_edges(list(graph.edges), cell_of, placed, is_folder=False)
        return diagram
