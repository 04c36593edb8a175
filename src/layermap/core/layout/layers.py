"""Layered view: one horizontal band per dependency depth.

Only containers that take part in an edge are drawn.  Band ``i`` holds
every container whose depth is ``i`` in the graph's layer assignment,
the same assignment that flags up-dependencies.
"""

from __future__ import annotations

import logging

from layermap.config.options import RenderOptions
from layermap.core.constants import NODE_MIN_HEIGHT, NODE_MIN_WIDTH, PADDING
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Container, Rectangle
from layermap.core.layout.base import leaf_edges
from layermap.core.layout.geometry import (
    align_offset,
    count_pills,
    details_text,
    reset_rects,
    sort_by_weight,
)
from layermap.core.layout.types import Diagram, DiagramBand, DiagramNode

logger = logging.getLogger(__name__)


def _slots(graph: Graph, members: list[Container]) -> list[list[Container]]:
    """Group band members joined by circular edges into shared slots.

    Slot order follows the first member of each group in *members*.
    """
    parent = {n.id: n.id for n in members}

    def find(node_id: int) -> int:
        while parent[node_id] != node_id:
            parent[node_id] = parent[parent[node_id]]
            node_id = parent[node_id]
        return node_id

    for edge in graph.edges:
        if not edge.is_circular:
            continue
        a, b = edge.source.id, edge.target.id
        if a in parent and b in parent:
            parent[find(a)] = find(b)

    groups: dict[int, list[Container]] = {}
    for node in members:
        groups.setdefault(find(node.id), []).append(node)
    return list(groups.values())


def slot_width(size: int) -> int:
    """Width of a slot shared by *size* mutually dependent containers."""
    if size <= 1:
        return NODE_MIN_WIDTH
    return max(NODE_MIN_WIDTH, size * NODE_MIN_WIDTH // 2)


class LayersLayout:
    """Stack dependency depths top to bottom, heaviest containers first."""

    def layout(self, graph: Graph, options: RenderOptions) -> Diagram:
        layering = graph.prepare_edges()
        reset_rects(graph)

        orphans = {n.id for n in graph.get_orphan_nodes()}
        rows: list[tuple[int, list[tuple[Container, Rectangle]]]] = []
        band_height = PADDING + NODE_MIN_HEIGHT + PADDING
        width = 0

        for depth, members in enumerate(layering.bands()):
            placed_row: list[tuple[Container, Rectangle]] = []
            x = 0
            for slot in _slots(graph, sort_by_weight(members)):
                member_width = slot_width(len(slot)) // len(slot)
                for node in slot:
                    placed_row.append(
                        (
                            node,
                            Rectangle(
                                x=x,
                                y=depth * band_height + PADDING,
                                w=member_width,
                                h=NODE_MIN_HEIGHT,
                            ),
                        )
                    )
                    x += member_width
            rows.append((x, placed_row))
            width = max(width, x)

        height = band_height * len(rows)
        top = graph.root.get_first_non_common_root()
        top.rect = Rectangle(0, 0, width, height)

        diagram = Diagram(width=width, height=height, title=top.name)
        placed: dict[int, Rectangle] = {}
        for depth, (row_width, placed_row) in enumerate(rows):
            if options.layers:
                diagram.bands.append(
                    DiagramBand(depth=depth, rect=Rectangle(0, depth * band_height, width, band_height))
                )
            shift = align_offset(width, row_width, options.align)
            for node, rect in placed_row:
                rect.x += shift
                node.rect = rect
                placed[node.id] = rect
                diagram.nodes.append(
                    DiagramNode(
                        container=node,
                        rect=rect,
                        is_orphan=node.id in orphans,
                        details=details_text(node) if options.details else "",
                        pills=count_pills(node, rect),
                    )
                )

        diagram.edges = leaf_edges(list(graph.edges), placed)
        logger.debug("Layers view: %d band(s), %dx%d", len(rows), width, height)
        return diagram
