"""The dependency graph: one container tree plus one edge collection."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from layermap.core.graph.edges import Edge, EdgeCollection
from layermap.core.graph.layering import LayerAssignment, assign_layers, classify_edges
from layermap.core.graph.model import Container, ContainerTree

logger = logging.getLogger(__name__)

_PATH_SEPARATORS = re.compile(r"[\\/]")

# Weight bonus when one group points at the other and never the reverse.
_ONE_WAY_BONUS = 1_000_000
_FORWARD_SCALE = 100_000
_BACKWARD_SCALE = 1_000


@dataclass
class OutIn:
    """Edge counts between two node groups and the derived ordering weight."""

    out: int = 0
    into: int = 0
    weight: int = 0


def split_path(path: str) -> list[str]:
    """Split *path* on either slash style, dropping empty segments."""
    return [segment for segment in _PATH_SEPARATORS.split(path) if segment]


class Graph:
    """Owns the container tree, its root and every edge between containers.

    Args:
        root_name: Display name of the root container.
    """

    def __init__(self, root_name: str = "") -> None:
        self.tree = ContainerTree(root_name)
        self.edges = EdgeCollection()
        self.layering = LayerAssignment()

    @property
    def root(self) -> Container:
        return self.tree.root

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_file(self, path: str, segments: list[str] | None = None) -> Container:
        """Map *path* into the tree and return its leaf."""
        if segments is None:
            segments = split_path(path)
        return self.root.create_path_mapping(segments, path)

    def get_leaf(self, payload: str) -> Container | None:
        return self.tree.lookup_leaf(payload)

    def upsert_edge(self, source: Container, target: Container) -> Edge:
        """Return the edge ``source -> target``, rolling it up when new."""
        edge, created = self.edges.upsert_edge(source, target)
        if created:
            source.rollup_is_calling_this_node(target)
            target.rollup_is_being_called_by_this_node(source)
        return edge

    def upsert_edge_by_payload(self, source: str, target: str) -> Edge:
        """Like :meth:`upsert_edge` but addressed by file path."""
        source_node = self.get_leaf(source) or self.add_file(source)
        target_node = self.get_leaf(target) or self.add_file(target)
        return self.upsert_edge(source_node, target_node)

    # ------------------------------------------------------------------
    # Removal and merging
    # ------------------------------------------------------------------

    def drop_subtree(self, node: Container) -> None:
        """Remove *node* and its descendants together with their edges.

        Edges are dropped before the containers are detached; roll-ups are
        then rebuilt from the surviving edges.
        """
        members = [node, *node.iter_descendants()]
        dropped = self.edges.drop_edges_touching(members)
        self.tree.unregister(node)
        self.root.remove_node_descendant(node)
        self.rebuild_rollups()
        logger.debug("Dropped %s with %d edge(s)", node.name, dropped)

    def merge_leaves(self, keep: Container, drop: Container, name: str | None = None) -> None:
        """Fold *drop* into *keep*, moving its edges and removing it."""
        if keep is drop:
            return
        self.edges.redirect(drop, keep)
        self.tree.unregister(drop)
        self.root.remove_node_descendant(drop)
        if name is not None:
            keep.name = name
        self.rebuild_rollups()

    def rebuild_rollups(self) -> None:
        """Recompute every container's roll-up lists from the current edges."""
        self.root.clear_rollup()
        for node in self.root.iter_descendants():
            node.clear_rollup()
        for edge in self.edges:
            edge.source.rollup_is_calling_this_node(edge.target)
            edge.target.rollup_is_being_called_by_this_node(edge.source)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_nodes(self) -> list[Container]:
        """Every container in the tree, root included, in pre-order."""
        return [self.root, *self.root.iter_descendants()]

    def get_all_nodes_in_edges(self) -> list[Container]:
        """Containers that appear in at least one edge, in first-seen order."""
        seen: set[int] = set()
        result: list[Container] = []
        for edge in self.edges:
            for node in (edge.source, edge.target):
                if node.id not in seen:
                    seen.add(node.id)
                    result.append(node)
        return result

    def get_orphan_nodes(self) -> list[Container]:
        """Containers with no edges; folders also need to hold no files."""
        in_edges = {n.id for n in self.get_all_nodes_in_edges()}
        orphans: list[Container] = []
        for node in self.get_all_nodes():
            if node.id in in_edges:
                continue
            if node.is_leaf:
                orphans.append(node)
            elif next(node.iter_leaves(), None) is None:
                orphans.append(node)
        return orphans

    def is_orphan(self, node: Container) -> bool:
        return any(o is node for o in self.get_orphan_nodes())

    def is_circular(self, a: Container, b: Container) -> bool:
        return self.edges.is_circular(a, b)

    def get_up_dependencies_count(self) -> int:
        return sum(1 for e in self.edges if e.is_up_dependency)

    def get_circular_dependencies_count(self) -> int:
        return sum(1 for e in self.edges if e.is_circular)

    def get_out_in(self, group_a: Container, group_b: Container) -> OutIn:
        """Compare two groups by the leaf-level edges running between them.

        A positive weight means *group_a* should be placed before
        *group_b*.
        """
        flat_a = group_a.get_flatter_list()
        flat_b = group_b.get_flatter_list()
        out = sum(
            self.edges.get_total_matching_target_for_this_source(n, flat_b)
            for n in flat_a
        )
        into = sum(
            self.edges.get_total_matching_target_for_this_source(n, flat_a)
            for n in flat_b
        )
        if into == 0 and out > 0:
            weight = _ONE_WAY_BONUS + into
        else:
            weight = out * _FORWARD_SCALE - into * _BACKWARD_SCALE
        return OutIn(out=out, into=into, weight=weight)

    # ------------------------------------------------------------------
    # Edge preparation
    # ------------------------------------------------------------------

    def prepare_edges(self) -> LayerAssignment:
        """Sort edges, flag circular pairs, assign layers, flag up-dependencies."""
        self.edges.sort_by_name()
        for edge in self.edges:
            edge.is_circular = self.edges.is_circular(edge.source, edge.target)
        self.layering = assign_layers(self.edges)
        up = classify_edges(self.edges, self.layering)
        logger.debug(
            "Prepared %d edge(s): %d circular, %d upward",
            len(self.edges),
            self.get_circular_dependencies_count(),
            up,
        )
        return self.layering
