"""Layer assignment and up-dependency classification.

A node's depth is its longest distance from a node with no incoming
non-circular edge.  One :class:`LayerAssignment` is computed per render;
edge classification and the layered view both read from it.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field

from layermap.core.graph.edges import EdgeCollection
from layermap.core.graph.model import Container

logger = logging.getLogger(__name__)


@dataclass
class LayerAssignment:
    """Depth per container id, plus the containers in first-seen order."""

    depths: dict[int, int] = field(default_factory=dict)
    nodes: list[Container] = field(default_factory=list)

    def depth_of(self, node: Container) -> int | None:
        return self.depths.get(node.id)

    @property
    def layer_count(self) -> int:
        return max(self.depths.values(), default=-1) + 1

    def bands(self) -> list[list[Container]]:
        """Containers grouped by depth; band ``i`` holds depth ``i``."""
        result: list[list[Container]] = [[] for _ in range(self.layer_count)]
        for node in self.nodes:
            result[self.depths[node.id]].append(node)
        return result

    def __iter__(self) -> Iterator[tuple[Container, int]]:
        for node in self.nodes:
            yield node, self.depths[node.id]


def _edge_nodes(edges: EdgeCollection) -> list[Container]:
    seen: set[int] = set()
    nodes: list[Container] = []
    for edge in edges:
        for node in (edge.source, edge.target):
            if node.id not in seen:
                seen.add(node.id)
                nodes.append(node)
    return nodes


def assign_layers(edges: EdgeCollection) -> LayerAssignment:
    """Compute the depth of every container that takes part in an edge.

    Circular and self edges are ignored when computing depth.  Expects the
    ``is_circular`` flags to be current.
    """
    nodes = _edge_nodes(edges)
    preds: dict[int, list[int]] = {n.id: [] for n in nodes}
    succs: dict[int, list[int]] = {n.id: [] for n in nodes}

    for edge in edges:
        if edge.is_circular or edge.is_self:
            continue
        src, tgt = edge.source.id, edge.target.id
        if src not in preds[tgt]:
            preds[tgt].append(src)
            succs[src].append(tgt)

    depths: dict[int, int] = {}
    tentative: dict[int, int] = {}
    remaining = {node_id: len(p) for node_id, p in preds.items()}

    queue: deque[int] = deque()
    for node in nodes:
        if remaining[node.id] == 0:
            depths[node.id] = 0
            queue.append(node.id)

    while queue:
        current = queue.popleft()
        for nxt in succs[current]:
            tentative[nxt] = max(tentative.get(nxt, 0), depths[current] + 1)
            remaining[nxt] -= 1
            if remaining[nxt] == 0:
                depths[nxt] = tentative[nxt]
                queue.append(nxt)

    # Whatever is left sits on, or downstream of, a cycle that does not
    # consist of mutual pairs.
    for node in nodes:
        if node.id not in depths:
            _resolve_residual(node.id, preds, depths)

    logger.debug(
        "Assigned %d nodes to %d layers",
        len(nodes),
        max(depths.values(), default=-1) + 1,
    )
    return LayerAssignment(depths=depths, nodes=nodes)


def _resolve_residual(
    start: int, preds: dict[int, list[int]], depths: dict[int, int]
) -> None:
    """Depth-first resolution that never re-enters a node being visited."""
    visiting = {start}
    stack = [(start, iter(preds[start]))]
    while stack:
        node_id, pending = stack[-1]
        descended = False
        for pred in pending:
            if pred in depths or pred in visiting:
                continue
            visiting.add(pred)
            stack.append((pred, iter(preds[pred])))
            descended = True
            break
        if descended:
            continue
        stack.pop()
        visiting.discard(node_id)
        depths[node_id] = max(
            (depths[p] + 1 for p in preds[node_id] if p in depths), default=0
        )


def classify_edges(edges: EdgeCollection, layers: LayerAssignment) -> int:
    """Set ``is_up_dependency`` on every edge and return how many are set.

    A circular edge is never an up-dependency.  Any other edge is one when
    its source is not strictly shallower than its target.
    """
    count = 0
    for edge in edges:
        if edge.is_circular:
            edge.is_up_dependency = False
            continue
        edge.is_up_dependency = (
            layers.depths[edge.source.id] >= layers.depths[edge.target.id]
        )
        if edge.is_up_dependency:
            count += 1
    return count
