"""Poster view: the whole containment tree as nested boxes.

The first branching container stacks its children top to bottom.  Every
folder below it lays its children out left to right inside a padded
frame, so each rectangle encloses its children plus padding.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key

from layermap.config.options import RenderOptions
from layermap.core.constants import NODE_MIN_HEIGHT, NODE_MIN_WIDTH, PADDING
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Container, Rectangle
from layermap.core.layout.base import scoped_edges
from layermap.core.layout.geometry import (
    align_offset,
    count_pills,
    details_text,
    get_node_list_as_tooltip,
    reset_rects,
)
from layermap.core.layout.types import Diagram, DiagramNode

logger = logging.getLogger(__name__)


class PosterLayout:
    """Nested layout of every folder and file under the first branching root."""

    def layout(self, graph: Graph, options: RenderOptions) -> Diagram:
        layering = graph.prepare_edges()
        reset_rects(graph)

        top = graph.root.get_first_non_common_root()
        order = self._ordering(graph)

        if top.is_leaf or not top.sub_ids:
            top.rect = Rectangle(0, 0, NODE_MIN_WIDTH, NODE_MIN_HEIGHT)
        else:
            self._measure_stack(top, order)
            self._place_stack(top, order, options)

        diagram = Diagram(width=top.rect.w, height=top.rect.h, title=top.name)
        orphans = {n.id for n in graph.get_orphan_nodes()}
        placed: dict[int, Rectangle] = {}

        drawn = [top] if top.is_leaf or not top.sub_ids else list(top.iter_descendants())
        for node in drawn:
            placed[node.id] = node.rect
            targets = node.get_external_targets()
            depth = layering.depth_of(node) if options.layers else None
            diagram.nodes.append(
                DiagramNode(
                    container=node,
                    rect=node.rect,
                    is_folder=not node.is_leaf,
                    is_orphan=node.id in orphans,
                    depth=depth,
                    details=details_text(node) if options.details else "",
                    tooltip=get_node_list_as_tooltip(targets) if targets else "",
                    pills=count_pills(node, node.rect) if options.details and node.is_leaf else [],
                )
            )

        diagram.edges = scoped_edges(graph, options, placed)
        logger.debug("Poster view: %dx%d", diagram.width, diagram.height)
        return diagram

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    @staticmethod
    def _ordering(graph: Graph):
        """Sort key placing groups that others depend on after their callers."""

        def compare(a: Container, b: Container) -> int:
            forward = graph.get_out_in(a, b).weight
            backward = graph.get_out_in(b, a).weight
            if forward != backward:
                return -1 if forward > backward else 1
            if a.get_weight() != b.get_weight():
                return -1 if a.get_weight() > b.get_weight() else 1
            return (a.name > b.name) - (a.name < b.name)

        return cmp_to_key(compare)

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def _measure_stack(self, top: Container, order) -> None:
        children = sorted(top.sub, key=order)
        for child in children:
            self._measure_row(child, order)
        top.rect.w = max(child.rect.w for child in children)
        top.rect.h = sum(child.rect.h for child in children)

    def _measure_row(self, node: Container, order) -> None:
        if node.is_leaf or not node.sub_ids:
            node.rect.w = NODE_MIN_WIDTH
            node.rect.h = NODE_MIN_HEIGHT
            return
        children = node.sub
        for child in children:
            self._measure_row(child, order)
        node.rect.w = 2 * PADDING + sum(child.rect.w for child in children)
        node.rect.h = 2 * PADDING + max(child.rect.h for child in children)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def _place_stack(self, top: Container, order, options: RenderOptions) -> None:
        top.rect.x = 0
        top.rect.y = 0
        y = 0
        for child in sorted(top.sub, key=order):
            x = align_offset(top.rect.w, child.rect.w, options.align)
            self._place_row(child, x, y, order)
            y += child.rect.h

    def _place_row(self, node: Container, x: int, y: int, order) -> None:
        node.rect.x = x
        node.rect.y = y
        if node.is_leaf or not node.sub_ids:
            return
        cursor = x + PADDING
        for child in sorted(node.sub, key=order):
            self._place_row(child, cursor, y + PADDING, order)
            cursor += child.rect.w
